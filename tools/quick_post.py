import sys
from datetime import datetime, timedelta, UTC
from pathlib import Path

# ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient
from planora.main import app

client = TestClient(app)
email = "quick_test_user@example.com"
password = "correct_horse_battery_staple"
r = client.post("/auth/register", json={"email": email, "password": password})
print('register', r.status_code)
r = client.post("/auth/login", json={"email": email, "password": password})
token = r.json()["token"]
headers = {"Authorization": f"Bearer {token}"}

exam_date = (datetime.now(UTC) + timedelta(days=3)).isoformat()
r = client.post("/exams/", json={"course": "Math 101", "title": "Midterm", "exam_date": exam_date}, headers=headers)
print('exam', r.status_code)
r = client.get("/notifications", headers=headers)
try:
    for item in r.json():
        print(item["title"], "-", item["message"], f"({item['display_time']})")
except Exception:
    print('text:', r.text)
