import pytest

from mindleaf_backend.model.auth import UserRole
from mindleaf_backend.services.progress import (
    course_progress_detail,
    enrolled_courses_progress,
    progress_percent,
)
from mindleaf_backend.tests.fixtures import complete, enroll_user, make_course, make_lesson, make_user


@pytest.mark.unit
class TestProgressPercent:

    def test_zero_lessons_is_zero(self):
        assert progress_percent(0, 0) == 0.0

    def test_not_rounded(self):
        assert progress_percent(1, 3) == pytest.approx(33.3333333)
        assert isinstance(progress_percent(1, 3), float)

    def test_complete(self):
        assert progress_percent(4, 4) == 100.0


@pytest.mark.unit
class TestProgressAggregation:

    def test_counts_per_enrolled_course(self, db_session):
        author = make_user(db_session, "author@mindleaf.io", UserRole.CREATOR)
        student = make_user(db_session, "alice@mindleaf.io")
        other = make_user(db_session, "bob@mindleaf.io")

        first = make_course(db_session, author, title="First")
        lessons = [make_lesson(db_session, first, title=f"L{i}") for i in range(3)]
        empty = make_course(db_session, author, title="Empty")
        make_course(db_session, author, title="Not enrolled")

        enroll_user(db_session, student, first)
        enroll_user(db_session, student, empty)
        complete(db_session, student, lessons[0])
        complete(db_session, student, lessons[1], completed=False)
        complete(db_session, other, lessons[2])

        result = {entry.course.title: entry for entry in enrolled_courses_progress(db_session, student.id)}

        assert set(result) == {"First", "Empty"}
        assert result["First"].total_lessons == 3
        assert result["First"].completed_lessons == 1
        assert result["First"].progress == pytest.approx(100 / 3)
        assert result["Empty"].total_lessons == 0
        assert result["Empty"].progress == 0.0

    def test_nothing_enrolled(self, db_session):
        student = make_user(db_session, "alice@mindleaf.io")
        assert enrolled_courses_progress(db_session, student.id) == []

    def test_course_detail(self, db_session):
        author = make_user(db_session, "author@mindleaf.io", UserRole.CREATOR)
        student = make_user(db_session, "alice@mindleaf.io")
        course = make_course(db_session, author)
        second = make_lesson(db_session, course, title="Second", order_index=2)
        first = make_lesson(db_session, course, title="First", order_index=1, pdf_url="pdfs/a.pdf")
        complete(db_session, student, second)

        detail = course_progress_detail(db_session, student.id, course.id, resolve_pdf=lambda ref: f"signed:{ref}")

        assert [entry.lesson.title for entry in detail.lessons] == ["First", "Second"]
        assert [entry.completed for entry in detail.lessons] == [False, True]
        assert detail.lessons[0].lesson.pdf_url == "signed:pdfs/a.pdf"
        assert detail.total_lessons == 2
        assert detail.completed_lessons == 1
        assert detail.progress == 50.0
        assert first.id == detail.lessons[0].lesson.id
