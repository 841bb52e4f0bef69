from datetime import datetime, timedelta, UTC
from zoneinfo import ZoneInfo

from sqlalchemy.exc import OperationalError
from conftest import bearer, signup
from planora.models.exam import Exam
from planora.models.task import Task
from planora.models.user import Profile
from planora.services import schedule
from planora.services.schedule import NotificationFeed, build_notifications, build_today_schedule

NOW = datetime(2024, 1, 1, 0, 0, tzinfo=UTC)
UTC_ZONE = ZoneInfo("UTC")


def make_user(db, email="owner@example.com"):
    profile = Profile(email=email, password="x")
    db.add(profile)
    db.commit()
    return profile.id


def add(db, *rows):
    db.add_all(rows)
    db.commit()
    return rows


def test_only_future_exams_become_notifications(db):
    uid = make_user(db)
    future, past = add(
        db,
        Exam(user_id=uid, course="Chem", title="Midterm", exam_date=NOW + timedelta(days=3)),
        Exam(user_id=uid, course="Chem", title="Quiz", exam_date=NOW - timedelta(hours=1)),
    )

    items = build_notifications(db, uid, NOW, UTC_ZONE)
    ids = [i.id for i in items]
    assert ids.count(f"exam-{future.id}") == 1
    assert f"exam-{past.id}" not in ids


def test_exam_message_embeds_whole_days(db):
    uid = make_user(db)
    add(db, Exam(user_id=uid, course="Physics", title="Final", exam_date=datetime(2024, 1, 4, tzinfo=UTC)))

    (item,) = build_notifications(db, uid, NOW, UTC_ZONE)
    assert item.kind == "exam"
    assert item.title == "Upcoming Exam: Physics"
    assert "3 days" in item.message
    assert item.display_time == "Jan 04, 2024"


def test_partial_days_round_up(db):
    uid = make_user(db)
    add(db, Exam(user_id=uid, course="Art", title="Crit", exam_date=NOW + timedelta(days=1, hours=2)))

    (item,) = build_notifications(db, uid, NOW, UTC_ZONE)
    assert item.message == "Crit in 2 days"


def test_overdue_tasks_skip_completed(db):
    uid = make_user(db)
    open_task, done_task = add(
        db,
        Task(user_id=uid, title="Lab report", due_date=NOW - timedelta(days=2)),
        Task(user_id=uid, title="Old essay", due_date=NOW - timedelta(days=2), completed=True),
    )

    items = build_notifications(db, uid, NOW, UTC_ZONE)
    ids = [i.id for i in items]
    assert ids == [f"overdue-{open_task.id}"]
    assert items[0].title == "Overdue Task"
    assert items[0].message == "Lab report"
    assert all(done_task.id not in i for i in ids)


def test_due_soon_window_and_default_course(db):
    uid = make_user(db)
    soon, later = add(
        db,
        Task(user_id=uid, title="Problem set", due_date=NOW + timedelta(days=2)),
        Task(user_id=uid, title="Project", due_date=NOW + timedelta(days=8), course="CS"),
    )

    items = build_notifications(db, uid, NOW, UTC_ZONE)
    assert [i.id for i in items] == [f"upcoming-{soon.id}"]
    assert items[0].course == "General"
    assert items[0].message == "Problem set due in 2 days"


def test_exam_starting_now_is_still_upcoming(db):
    uid = make_user(db)
    (exam,) = add(db, Exam(user_id=uid, course="Bio", title="Oral", exam_date=NOW))

    items = build_notifications(db, uid, NOW, UTC_ZONE)
    assert [i.id for i in items] == [f"exam-{exam.id}"]
    assert items[0].message == "Oral in 0 days"


def test_due_soon_window_includes_both_ends(db):
    uid = make_user(db)
    due_now, edge, past_edge = add(
        db,
        Task(user_id=uid, title="Now", due_date=NOW),
        Task(user_id=uid, title="Edge", due_date=NOW + timedelta(days=7)),
        Task(user_id=uid, title="Past edge", due_date=NOW + timedelta(days=7, seconds=1)),
    )

    items = build_notifications(db, uid, NOW, UTC_ZONE)
    ids = [i.id for i in items]
    assert f"upcoming-{due_now.id}" in ids
    assert f"overdue-{due_now.id}" not in ids
    assert f"upcoming-{edge.id}" in ids
    assert f"upcoming-{past_edge.id}" not in ids
    assert {i.message for i in items} == {"Now due in 0 days", "Edge due in 7 days"}


def test_sources_keep_their_order_and_are_capped(db):
    uid = make_user(db)
    add(db, *[Exam(user_id=uid, course="C", title=f"E{i}", exam_date=NOW + timedelta(days=i + 1)) for i in range(7)])
    add(db, Task(user_id=uid, title="late", due_date=NOW - timedelta(days=1)))
    add(db, Task(user_id=uid, title="soon", due_date=NOW + timedelta(hours=5)))

    items = build_notifications(db, uid, NOW, UTC_ZONE)
    kinds = [i.id.split("-")[0] for i in items]
    assert kinds == ["exam"] * 5 + ["overdue", "upcoming"]
    assert [i.message.split(" ")[0] for i in items[:5]] == ["E0", "E1", "E2", "E3", "E4"]


def test_other_users_rows_never_appear(db):
    uid = make_user(db)
    other = make_user(db, "other@example.com")
    add(db, Exam(user_id=other, course="C", title="Theirs", exam_date=NOW + timedelta(days=1)))
    add(db, Task(user_id=other, title="Theirs", due_date=NOW - timedelta(days=1)))

    assert build_notifications(db, uid, NOW, UTC_ZONE) == []


def test_anonymous_caller_gets_empty_feed(db):
    assert build_notifications(db, None, NOW) == []
    assert build_today_schedule(db, None, NOW) == []


def test_failed_source_is_treated_as_empty(db, monkeypatch):
    uid = make_user(db)
    exam, _ = add(
        db,
        Exam(user_id=uid, course="Bio", title="Final", exam_date=NOW + timedelta(days=1)),
        Task(user_id=uid, title="late", due_date=NOW - timedelta(days=1)),
    )

    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(schedule, "fetch_overdue_tasks", broken)
    items = build_notifications(db, uid, NOW, UTC_ZONE)
    assert [i.id for i in items] == [f"exam-{exam.id}"]


def test_today_schedule_is_chronological(db):
    uid = make_user(db)
    now = datetime(2024, 3, 10, 8, 0, tzinfo=UTC)
    overdue, morning, exam, tomorrow_exam, next_week = add(
        db,
        Task(user_id=uid, title="yesterday", due_date=now - timedelta(hours=9)),  # 23:00 the day before
        Task(user_id=uid, title="morning", due_date=now + timedelta(hours=1, minutes=30)),
        Exam(user_id=uid, course="Math", title="Quiz", exam_date=now + timedelta(hours=2)),
        Exam(user_id=uid, course="Math", title="Oral", exam_date=now + timedelta(days=1)),
        Task(user_id=uid, title="next week", due_date=now + timedelta(days=7)),
    )

    items = build_today_schedule(db, uid, now, UTC_ZONE)
    assert [i.id for i in items] == [
        f"task-{overdue.id}",
        f"task-{morning.id}",
        f"exam-{exam.id}",
        f"exam-{tomorrow_exam.id}",
    ]
    # sorting the display strings would have put 23:00 last
    assert items[0].display_time == "23:00"
    assert items[1].display_time == "09:30"


def test_dismiss_is_local_only(db):
    uid = make_user(db)
    (task,) = add(db, Task(user_id=uid, title="late", due_date=NOW - timedelta(days=1)))

    feed = NotificationFeed(build_notifications(db, uid, NOW, UTC_ZONE))
    assert feed.unread_count == 1
    assert feed.dismiss(f"overdue-{task.id}") is True
    assert feed.dismiss(f"overdue-{task.id}") is False
    assert len(feed) == 0

    # a rebuild brings it back
    assert len(NotificationFeed(build_notifications(db, uid, NOW, UTC_ZONE))) == 1


def test_notifications_endpoint(client):
    assert client.get("/notifications").json() == []
    assert client.get("/notifications", headers=bearer("not-a-jwt")).json() == []

    token, _ = signup(client)
    due = (datetime.now(UTC) - timedelta(days=1)).isoformat()
    task = client.post("/tasks/", json={"title": "late", "due_date": due}, headers=bearer(token)).json()
    r = client.get("/notifications", headers=bearer(token))
    assert r.status_code == 200
    assert [i["id"] for i in r.json()] == [f"overdue-{task['id']}"]


def test_dashboard_endpoint(client):
    token, _ = signup(client)
    exam_date = (datetime.now(UTC) + timedelta(days=10)).isoformat()
    client.post("/exams/", json={"course": "Law", "title": "Bar", "exam_date": exam_date}, headers=bearer(token))
    client.post("/tasks/", json={"title": "open"}, headers=bearer(token))
    done = client.post("/tasks/", json={"title": "done"}, headers=bearer(token)).json()
    client.patch(f"/tasks/{done['id']}", json={"completed": True}, headers=bearer(token))
    s = client.post("/pomodoro/sessions", json={"duration": 25}, headers=bearer(token)).json()
    client.post(f"/pomodoro/sessions/{s['id']}/complete", headers=bearer(token))

    r = client.get("/dashboard", headers=bearer(token))
    assert r.status_code == 200
    stats = r.json()["stats"]
    assert stats["active_tasks"] == 1
    assert stats["completed_today"] == 1
    assert stats["next_exam"]["course"] == "Law"
    assert stats["focus_minutes"] == 25
    assert stats["sessions_completed"] == 1
