import pytest

from mindleaf_backend.model import Lesson, LessonProgress
from mindleaf_backend.tests.fixtures import (
    auth,
    complete,
    enroll_user,
    make_course,
    make_lesson,
    make_user,
)


@pytest.mark.integration
class TestLessonVisibility:

    def test_allowlisted_but_not_enrolled_gets_summaries(self, client, db_session, creator, student):
        course = make_course(db_session, creator, restricted=True, emails=["student@mindleaf.io"])
        make_lesson(db_session, course, title="Intro", order_index=1)
        make_lesson(db_session, course, title="Deep dive", order_index=5)

        response = client.get(f"/lessons/course/{course.id}", headers=auth(student))

        assert response.status_code == 200
        body = response.json()
        assert [(l["title"], l["order_index"], l["position"]) for l in body] == [
            ("Intro", 1, 1),
            ("Deep dive", 5, 2),
        ]
        assert all("content" not in l for l in body)

    def test_enrolled_and_allowlisted_gets_full_content(self, client, db_session, creator, student):
        course = make_course(db_session, creator, restricted=True, emails=["student@mindleaf.io"])
        make_lesson(db_session, course, title="Intro", content="Secret sauce")
        enroll_user(db_session, student, course)

        body = client.get(f"/lessons/course/{course.id}", headers=auth(student)).json()

        assert body[0]["content"] == "Secret sauce"
        assert "position" not in body[0]

    def test_enrolled_but_removed_from_allowlist_gets_summaries(self, client, db_session, creator, student):
        course = make_course(db_session, creator, restricted=True, emails=["someone@mindleaf.io"])
        make_lesson(db_session, course)
        enroll_user(db_session, student, course)

        body = client.get(f"/lessons/course/{course.id}", headers=auth(student)).json()

        assert body[0]["position"] == 1

    def test_author_gets_full_content_without_enrollment(self, client, db_session, creator):
        course = make_course(db_session, creator, restricted=True)
        make_lesson(db_session, course, content="Draft")

        body = client.get(f"/lessons/course/{course.id}", headers=auth(creator)).json()

        assert body[0]["content"] == "Draft"

    def test_course_lessons_need_authentication(self, client, db_session, creator):
        course = make_course(db_session, creator)

        assert client.get(f"/lessons/course/{course.id}").status_code == 401

    def test_course_lessons_missing_course(self, client, student):
        assert client.get("/lessons/course/999", headers=auth(student)).status_code == 404

    def test_single_lesson_requires_full_access(self, client, db_session, creator, student):
        course = make_course(db_session, creator)
        lesson = make_lesson(db_session, course)

        response = client.get(f"/lessons/{lesson.id}", headers=auth(student))
        assert response.status_code == 403
        assert response.json()["reason"] == "lesson_locked"

        enroll_user(db_session, student, course)
        response = client.get(f"/lessons/{lesson.id}", headers=auth(student))
        assert response.status_code == 200
        assert response.json()["id"] == lesson.id

    def test_single_lesson_missing(self, client, student):
        assert client.get("/lessons/999", headers=auth(student)).status_code == 404

    def test_list_all_is_scoped(self, client, db_session, creator, admin, student):
        open_course = make_course(db_session, creator, title="Open")
        other = make_course(db_session, creator, title="Other")
        make_lesson(db_session, open_course, title="Visible")
        make_lesson(db_session, other, title="Hidden")
        enroll_user(db_session, student, open_course)

        assert [l["title"] for l in client.get("/lessons", headers=auth(student)).json()] == ["Visible"]
        assert len(client.get("/lessons", headers=auth(admin)).json()) == 2
        assert len(client.get("/lessons", headers=auth(creator)).json()) == 2

    def test_signed_pdf_url_falls_back_to_stored_key(self, client, db_session, creator):
        course = make_course(db_session, creator)
        make_lesson(db_session, course, pdf_url="pdfs/abc_notes.pdf")
        make_lesson(db_session, course, pdf_url="/files/pdfs/local.pdf")

        body = client.get(f"/lessons/course/{course.id}", headers=auth(creator)).json()

        assert [l["pdf_url"] for l in body] == ["pdfs/abc_notes.pdf", "/files/pdfs/local.pdf"]


@pytest.mark.integration
class TestLessonCreate:

    def test_author_creates_lessons_in_sequence(self, client, db_session, creator):
        course = make_course(db_session, creator)

        first = client.post("/lessons", data={"course_id": course.id, "title": "One"}, headers=auth(creator))
        second = client.post("/lessons", data={"course_id": course.id, "title": "Two", "content": "x"}, headers=auth(creator))

        assert first.status_code == 200
        assert first.json()["order_index"] == 1
        assert second.json()["order_index"] == 2

    def test_pdf_upload_is_stored(self, client, db_session, creator, storage):
        course = make_course(db_session, creator)

        response = client.post(
            "/lessons",
            data={"course_id": course.id, "title": "With pdf"},
            files={"pdf": ("notes.pdf", b"%PDF-1.4 test", "application/pdf")},
            headers=auth(creator),
        )

        pdf_url = response.json()["pdf_url"]
        assert pdf_url.startswith("/files/pdfs/") and pdf_url.endswith("_notes.pdf")

    def test_student_and_other_creators_are_forbidden(self, client, db_session, creator, student):
        course = make_course(db_session, creator)
        rival = make_user(db_session, "rival@mindleaf.io", creator.role)

        assert client.post("/lessons", data={"course_id": course.id, "title": "x"}, headers=auth(student)).status_code == 403
        assert client.post("/lessons", data={"course_id": course.id, "title": "x"}, headers=auth(rival)).status_code == 403

    def test_missing_course(self, client, admin):
        response = client.post("/lessons", data={"course_id": 999, "title": "x"}, headers=auth(admin))

        assert response.status_code == 404

    def test_missing_title(self, client, db_session, creator):
        course = make_course(db_session, creator)

        response = client.post("/lessons", data={"course_id": course.id}, headers=auth(creator))

        assert response.status_code == 400


@pytest.mark.integration
class TestLessonUpdateDelete:

    def test_partial_update(self, client, db_session, creator):
        course = make_course(db_session, creator)
        lesson = make_lesson(db_session, course, title="Old", content="Keep", pdf_url="/files/pdfs/a.pdf")

        response = client.put(f"/lessons/{lesson.id}", data={"title": "New"}, headers=auth(creator))

        body = response.json()
        assert body["title"] == "New"
        assert body["content"] == "Keep"
        assert body["pdf_url"] == "/files/pdfs/a.pdf"

    def test_clear_pdf(self, client, db_session, creator):
        course = make_course(db_session, creator)
        lesson = make_lesson(db_session, course, pdf_url="/files/pdfs/a.pdf")

        response = client.put(f"/lessons/{lesson.id}", data={"clear_pdf": "true"}, headers=auth(creator))

        assert response.json()["pdf_url"] is None

    def test_update_forbidden_for_student(self, client, db_session, creator, student):
        lesson = make_lesson(db_session, make_course(db_session, creator))

        assert client.put(f"/lessons/{lesson.id}", data={"title": "x"}, headers=auth(student)).status_code == 403

    def test_delete_removes_progress(self, client, db_session, creator, student):
        course = make_course(db_session, creator)
        lesson = make_lesson(db_session, course)
        enroll_user(db_session, student, course)
        complete(db_session, student, lesson)
        lesson_id = lesson.id

        response = client.delete(f"/lessons/{lesson_id}", headers=auth(creator))

        assert response.status_code == 204
        assert db_session.query(Lesson).filter(Lesson.id == lesson_id).count() == 0
        assert db_session.query(LessonProgress).filter(LessonProgress.lesson_id == lesson_id).count() == 0

    def test_delete_missing(self, client, creator):
        assert client.delete("/lessons/999", headers=auth(creator)).status_code == 404


@pytest.mark.integration
class TestLessonReorder:

    def test_reorder_assigns_list_order(self, client, db_session, creator):
        course = make_course(db_session, creator)
        l1 = make_lesson(db_session, course, title="1", order_index=1)
        l2 = make_lesson(db_session, course, title="2", order_index=2)
        l3 = make_lesson(db_session, course, title="3", order_index=3)
        ids = {"l1": l1.id, "l2": l2.id, "l3": l3.id}

        response = client.post(
            f"/lessons/course/{course.id}/reorder",
            json=[ids["l3"], ids["l1"], ids["l2"]],
            headers=auth(creator),
        )

        assert response.status_code == 200
        order = {l["id"]: l["order_index"] for l in response.json()}
        assert order == {ids["l3"]: 1, ids["l1"]: 2, ids["l2"]: 3}
        assert [l["id"] for l in response.json()] == [ids["l3"], ids["l1"], ids["l2"]]

    def test_foreign_and_repeated_ids_are_ignored(self, client, db_session, creator):
        course = make_course(db_session, creator)
        other = make_course(db_session, creator, title="Other")
        a = make_lesson(db_session, course, title="a", order_index=1)
        b = make_lesson(db_session, course, title="b", order_index=2)
        stranger = make_lesson(db_session, other, title="stranger", order_index=1)
        ids = (a.id, b.id, stranger.id)

        response = client.post(
            f"/lessons/course/{course.id}/reorder",
            json=[ids[1], ids[2], ids[1], ids[0]],
            headers=auth(creator),
        )

        order = {l["id"]: l["order_index"] for l in response.json()}
        assert order == {ids[1]: 1, ids[0]: 2}
        db_session.expire_all()
        assert db_session.get(Lesson, ids[2]).order_index == 1

    def test_unlisted_lessons_keep_or_get_an_index(self, client, db_session, creator):
        course = make_course(db_session, creator)
        kept = make_lesson(db_session, course, title="kept", order_index=1)
        unset = make_lesson(db_session, course, title="unset", order_index=0)
        listed = make_lesson(db_session, course, title="listed", order_index=2)
        ids = {"kept": kept.id, "unset": unset.id, "listed": listed.id}

        response = client.post(f"/lessons/course/{course.id}/reorder", json=[ids["listed"]], headers=auth(creator))

        order = {l["id"]: l["order_index"] for l in response.json()}
        # the unlisted lesson keeps index 1 even though it now collides
        assert order == {ids["listed"]: 1, ids["kept"]: 1, ids["unset"]: 2}

    def test_reorder_forbidden_for_student(self, client, db_session, creator, student):
        course = make_course(db_session, creator)

        response = client.post(f"/lessons/course/{course.id}/reorder", json=[], headers=auth(student))

        assert response.status_code == 403
