import logging
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from carcheck.config import CarCheckConfig
from carcheck.logic.evaluation import EvaluationService
from carcheck.logic.extractor import ExtractorSettings, ListingExtractor
from carcheck.logic.narrator import Narrator
from carcheck.main import app, get_evaluation_service
from test_extractor import CHALLENGE_HTML, LISTING_HTML

LISTING_URL = "https://www.yad2.co.il/item/abc123"

MANUAL_CAR = {
    "title": "Toyota Corolla 2020",
    "year": 2020,
    "mileage": 15000,
    "price": 90000,
    "ownership": 1,
    "gearbox": "automatic",
    "engineType": "hybrid",
}

REPLY_WITHOUT_SCORE = '{"recommendation": "Good deal", "evaluation": "Efficient, well kept hybrid."}'


class BrokenNarrator:
    async def narrate(self, car_data, language="en"):
        raise RuntimeError("boom: secret internal state")


@pytest.fixture
def wire(browser_factory, chat_client):
    """Install a service built on fakes; returns (browser session, chat client)."""
    def install(html=LISTING_HTML, reply=REPLY_WITHOUT_SCORE, narrator=None):
        factory, session = browser_factory(html)
        client = chat_client(reply)
        service = EvaluationService(
            extractor=ListingExtractor(browser_factory=factory, settings=ExtractorSettings(screenshot_path="")),
            narrator=narrator or Narrator(client),
            allowed_hosts=["yad2.co.il"],
        )
        app.dependency_overrides[get_evaluation_service] = lambda: service
        return session, client

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_config_hides_api_key(client):
    body = client.get("/api/config").json()
    assert "api_key" not in body["llm"]
    assert body["listings"]["allowed_hosts"]


def test_neither_input_is_bad_request(client, wire):
    session, chat = wire()
    resp = client.post("/api/evaluate", json={"language": "en"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == {"error": "Either yad2Url or carData must be provided",
                                     "kind": "invalid_request"}
    assert session.calls == []
    assert chat.calls == []


def test_neither_input_hebrew_message(client, wire):
    wire()
    resp = client.post("/api/evaluate", json={"language": "he"})

    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "נדרש קישור יד2 או פרטי רכב"


def test_manual_input_uses_rule_score_when_model_omits_it(client, wire):
    session, chat = wire()
    resp = client.post("/api/evaluate", json={"carData": MANUAL_CAR})

    assert resp.status_code == 200
    body = resp.json()
    assert body["carData"] == MANUAL_CAR
    assert body["recommendation"] == "Good deal"
    assert body["label"] == "Good deal"
    assert body["evaluation"] == "Efficient, well kept hybrid."
    assert body["score"] == 100
    assert body["scoreSource"] == "rules"
    assert session.calls == []
    assert len(chat.calls) == 1


def test_manual_input_missing_mandatory_field(client, wire):
    wire()
    car = dict(MANUAL_CAR)
    del car["price"]
    resp = client.post("/api/evaluate", json={"carData": car})

    assert resp.status_code == 422


@pytest.mark.parametrize("year", [datetime.now().year + 1, 1899])
def test_manual_input_implausible_year(client, wire, year):
    _, chat = wire()
    resp = client.post("/api/evaluate", json={"carData": dict(MANUAL_CAR, year=year)})

    assert resp.status_code == 422
    assert chat.calls == []


def test_manual_input_current_year_accepted(client, wire):
    wire()
    resp = client.post("/api/evaluate", json={"carData": dict(MANUAL_CAR, year=datetime.now().year)})

    assert resp.status_code == 200


def test_manual_defaults_applied(client, wire):
    wire()
    car = {"title": "Kia Picanto 2015", "year": 2015, "mileage": 120000, "price": 30000}
    body = client.post("/api/evaluate", json={"carData": car}).json()

    assert body["carData"]["ownership"] == 1
    assert body["carData"]["gearbox"] == "automatic"
    assert body["carData"]["engineType"] == "gasoline"


def test_url_evaluation(client, wire):
    session, chat = wire(reply='{"recommendation": "Neutral – depends", "evaluation": "Fair.", "score": 61}')
    resp = client.post("/api/evaluate", json={"yad2Url": LISTING_URL, "language": "he"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["carData"]["title"] == "Toyota Corolla 2019 Hybrid"
    assert body["carData"]["price"] == 89000
    assert body["recommendation"] == "תלוי בהעדפות"
    assert body["score"] == 61
    assert body["scoreSource"] == "model"
    assert session.closed


def test_url_takes_precedence_over_manual_data(client, wire):
    session, _ = wire()
    resp = client.post("/api/evaluate", json={"yad2Url": LISTING_URL, "carData": MANUAL_CAR})

    assert resp.status_code == 200
    assert resp.json()["carData"]["title"] == "Toyota Corolla 2019 Hybrid"
    assert session.calls[0] == ("navigate", LISTING_URL, session.calls[0][2])


def test_non_yad2_url_rejected(client, wire):
    session, _ = wire()
    resp = client.post("/api/evaluate", json={"yad2Url": "https://example.com/car/1"})

    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "Only Yad2 URLs are supported"
    assert session.calls == []


def test_challenge_page(client, wire):
    session, chat = wire(html=CHALLENGE_HTML)
    resp = client.post("/api/evaluate", json={"yad2Url": LISTING_URL})

    assert resp.status_code == 503
    assert resp.json()["detail"]["kind"] == "challenge_detected"
    assert chat.calls == []
    assert session.closed


def test_narration_failure(client, wire):
    wire(reply="")
    resp = client.post("/api/evaluate", json={"carData": MANUAL_CAR, "language": "he"})

    assert resp.status_code == 502
    assert resp.json()["detail"] == {"error": "שגיאה בהערכת הרכב", "kind": "narration_failed"}


def test_unexpected_error_hides_details(client, wire):
    wire(narrator=BrokenNarrator())
    resp = client.post("/api/evaluate", json={"carData": MANUAL_CAR})

    assert resp.status_code == 500
    assert resp.json()["detail"] == {"error": "Failed to process car evaluation", "kind": "internal_error"}
    assert "secret" not in resp.text


def test_report_download(client):
    result = {
        "carData": MANUAL_CAR,
        "evaluation": "Efficient, well kept hybrid.",
        "recommendation": "Good deal",
        "label": "Good deal",
        "score": 88,
        "scoreSource": "model",
    }
    resp = client.post("/api/evaluate/report", json={"result": result})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "car-evaluation.txt" in resp.headers["content-disposition"]
    text = resp.text
    assert "Car Evaluation Results" in text
    assert "Engine Type: hybrid" in text
    assert "Recommendation: Good deal" in text
    assert text.rstrip().endswith("Score: 88%")


def error_logs(caplog):
    return [r.getMessage() for r in caplog.records if r.levelno >= logging.ERROR]


def test_challenge_failure_logged_with_url(client, wire, caplog):
    wire(html=CHALLENGE_HTML)
    with caplog.at_level(logging.INFO):
        client.post("/api/evaluate", json={"yad2Url": LISTING_URL})

    assert any("challenge_detected" in m and LISTING_URL in m for m in error_logs(caplog))


def test_narration_failure_logged_with_raw_reply(client, wire, caplog):
    wire(reply="   ")
    with caplog.at_level(logging.INFO):
        resp = client.post("/api/evaluate", json={"carData": MANUAL_CAR})

    assert resp.status_code == 502
    logged = [m for m in error_logs(caplog) if "raw=" in m]
    assert logged
    assert "Toyota Corolla 2020" in logged[0]


def test_invalid_request_not_logged_as_error(client, wire, caplog):
    wire()
    with caplog.at_level(logging.INFO):
        resp = client.post("/api/evaluate", json={"language": "en"})

    assert resp.status_code == 400
    assert error_logs(caplog) == []


def test_error_details_only_when_enabled(client, wire, monkeypatch):
    wire(html=CHALLENGE_HTML)
    resp = client.post("/api/evaluate", json={"yad2Url": LISTING_URL})
    assert "details" not in resp.json()["detail"]

    monkeypatch.setattr(CarCheckConfig, "EXPOSE_ERROR_DETAILS", True)
    wire(html=CHALLENGE_HTML)
    resp = client.post("/api/evaluate", json={"yad2Url": LISTING_URL})
    assert resp.status_code == 503
    assert resp.json()["detail"]["details"] == "challenge page"
