import base64

MONTICELLO = {
    "date": "2025-03-07",
    "latitude": "37.8714",
    "longitude": "-109.3425",
    "tz": "America/Denver",
}


def test_health(client):
    rv = client.get("/api/health")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["ok"] is True and data["status"] == "up"

    for path in ("/health", "/healthz"):
        assert client.get(path).get_json()["status"] == "ok"
    assert client.get("/").get_json()["service"] == "kronos"

def test_planetary_hours(client):
    q = dict(MONTICELLO, now="2025-03-07T17:20:25-07:00")
    rv = client.get("/api/planetary-hours", query_string=q)
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["date"] == "2025-03-07"
    assert data["location"] == {"latitude": 37.8714, "longitude": -109.3425, "defaulted": False}
    assert data["day_ruler"]["planet"] == "venus"
    assert data["solar"]["sunrise"] == "2025-03-07T05:26:00-07:00"
    assert data["solar"]["sunset"] == "2025-03-07T18:34:00-07:00"
    assert len(data["hours"]) == 24
    assert data["current"] == 11

    first = data["hours"][0]
    assert first["planet"] == "venus"
    assert first["start"] == "2025-03-07T05:26:00-07:00"
    assert first["start_label"] == "5:26 AM"
    assert first["duration_label"] == "1h 6m"

    flagged = [h for h in data["hours"] if h["is_current_hour"]]
    assert len(flagged) == 1
    assert flagged[0]["index"] == 11 and flagged[0]["planet"] == "saturn"

def test_planetary_hours_without_location_uses_default(client):
    rv = client.get("/api/planetary-hours", query_string={"date": "2025-03-07", "tz": "UTC"})
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["location"]["defaulted"] is True
    assert data["hours"][0]["start"] == "2025-03-07T06:00:00+00:00"

def test_current_hour_before_sunrise_uses_previous_day(client):
    q = dict(MONTICELLO, now="2025-03-08T03:00:00-07:00")
    q.pop("date")
    rv = client.get("/api/planetary-hours/current", query_string=q)
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["date"] == "2025-03-07"
    hour = data["hour"]
    assert hour["index"] == 22 and hour["hour_number"] == 10
    assert hour["period"] == "night"
    assert hour["planet"] == "venus"
    assert data["next"]["index"] == 23

def test_solar_events(client):
    rv = client.get("/api/solar-events", query_string=MONTICELLO)
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["fallback"] is False
    assert data["day_length_minutes"] == 788.0

def test_day_ruler(client):
    rv = client.get("/api/day-ruler", query_string={"date": "2025-03-09"})
    data = rv.get_json()
    assert rv.status_code == 200
    assert data["weekday_index"] == 0
    assert data["planet"] == "sun" and data["symbol"] == "☉"

def test_planetary_days(client):
    rv = client.get("/api/planetary-days", query_string={"start": "2025-03-09", "days": "3"})
    assert rv.status_code == 200
    days = rv.get_json()["days"]
    assert [d["planet"] for d in days] == ["sun", "moon", "mars"]

    rv = client.get("/api/planetary-days", query_string={"start": "2025-03-09", "days": "0"})
    assert rv.status_code == 400
    assert rv.get_json()["details"][0]["loc"] == ["days"]

def test_dignity(client):
    rv = client.get("/api/dignity", query_string={"planet": "sun", "sign": "leo"})
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["sign"] == "Leo"
    assert data["dignity"] == "rulership"
    assert data["status"] == "Domicile"

    rv = client.get("/api/dignity", query_string={"planet": "pluto", "sign": "virgin"})
    assert rv.status_code == 400
    locs = [d["loc"] for d in rv.get_json()["details"]]
    assert locs == [["planet"], ["sign"]]

def test_validation_errors(client):
    rv = client.get("/api/planetary-hours", query_string=dict(MONTICELLO, date="2025-02-30"))
    assert rv.status_code == 400
    data = rv.get_json()
    assert data["ok"] is False and data["error"] == "validation_error"
    assert data["details"][0]["loc"] == ["date"]

    rv = client.get("/api/planetary-hours", query_string=dict(MONTICELLO, tz="Mars/Base"))
    assert rv.get_json()["details"][0]["loc"] == ["tz"]

    rv = client.get("/api/planetary-hours", query_string=dict(MONTICELLO, latitude="95"))
    assert rv.get_json()["details"][0]["loc"] == ["latitude"]

    rv = client.get("/api/planetary-hours", query_string=dict(MONTICELLO, now="2025-03-07T12:00:00"))
    assert rv.status_code == 400
    assert rv.get_json()["details"][0]["loc"] == ["now"]

def test_unknown_route_is_json(client):
    rv = client.get("/api/nope")
    assert rv.status_code == 404
    assert rv.get_json()["error"] == "http_error"

def test_metrics_requires_auth(client, monkeypatch):
    assert client.get("/metrics").status_code == 401

    monkeypatch.setenv("METRICS_USER", "ops")
    monkeypatch.setenv("METRICS_PASS", "secret")
    token = base64.b64encode(b"ops:secret").decode()
    client.get("/api/health")
    rv = client.get("/metrics", headers={"Authorization": f"Basic {token}"})
    assert rv.status_code == 200
    assert b"kronos_api_requests_total" in rv.data

def test_cors_header(client):
    rv = client.get("/api/health", headers={"Origin": "https://example.org"})
    assert rv.headers.get("Access-Control-Allow-Origin") == "*"

def test_current_hour_in_fall_back_gap_keeps_last_night_hour(client):
    # 2025-11-02: clocks fall back at 02:00, so 2025-11-01's sequence ends about an hour before sunrise
    q = {
        "latitude": "37.8714",
        "longitude": "-109.3425",
        "tz": "America/Denver",
        "now": "2025-11-02T06:00:00-07:00",
    }
    rv = client.get("/api/planetary-hours/current", query_string=q)
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["date"] == "2025-11-01"
    assert data["extended"] is True
    assert data["hour"]["index"] == 24
    assert data["hour"]["planet"] == "mars"
    assert data["next"]["index"] == 1
    assert data["next"]["start"].startswith("2025-11-02T06:")

def test_current_hour_outside_gap_is_not_extended(client):
    q = dict(MONTICELLO, now="2025-03-08T03:00:00-07:00")
    q.pop("date")
    assert client.get("/api/planetary-hours/current", query_string=q).get_json()["extended"] is False

def test_day_endpoints_ignore_location(client):
    from prometheus_client import REGISTRY

    before = REGISTRY.get_sample_value("kronos_default_location_total")
    rv = client.get("/api/day-ruler", query_string={"date": "2025-03-09", "lat": "abc"})
    assert rv.status_code == 200
    rv = client.get("/api/planetary-days", query_string={"start": "2025-03-09", "longitude": "999"})
    assert rv.status_code == 200
    assert REGISTRY.get_sample_value("kronos_default_location_total") == before
