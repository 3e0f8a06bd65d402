"""Unit tests for the Subject model."""

from attendance.models.base import generate_id
from attendance.models.subject import Subject


class TestSubjectModel:
    """Tests for Subject model definition."""

    def test_table_name(self):
        assert Subject.__tablename__ == "subjects"

    def test_columns(self):
        columns = set(Subject.__table__.columns.keys())

        assert columns == {
            "id",
            "user_id",
            "name",
            "type",
            "conducted",
            "present",
            "created_at",
            "updated_at",
        }

    def test_user_id_indexed(self):
        assert Subject.__table__.columns["user_id"].index is True

    def test_count_defaults(self):
        assert Subject.__table__.columns["conducted"].default.arg == 0
        assert Subject.__table__.columns["present"].default.arg == 0

    def test_repr(self):
        subject = Subject(id="abc", name="Physics", conducted=4, present=3)

        assert repr(subject) == "Subject(id='abc', name='Physics', conducted=4, present=3)"


class TestGenerateId:
    def test_ids_are_unique_uuid_strings(self):
        first, second = generate_id(), generate_id()

        assert first != second
        assert len(first) == 36
