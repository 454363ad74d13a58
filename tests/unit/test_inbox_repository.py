from sqlalchemy.dialects import postgresql

from app.domain.enums import InboxConversationStatus
from app.infra.db.repositories import InboxConversationRepository, _escape_like


def _compile(**kwargs):
    stmt = InboxConversationRepository.feed_statement(**kwargs)
    return stmt.compile(dialect=postgresql.dialect())


def test_escape_like_treats_wildcards_literally() -> None:
    assert _escape_like("50%_off\\") == "50\\%\\_off\\\\"
    assert _escape_like("maria") == "maria"


def test_feed_statement_without_filters() -> None:
    compiled = _compile(limit=10)
    sql = str(compiled)

    assert "LEFT OUTER JOIN contacts" in sql
    assert "NULLS LAST" in sql
    assert "WHERE" not in sql
    assert "ILIKE" not in sql
    assert 10 in compiled.params.values()


def test_feed_statement_applies_status_and_escaped_search() -> None:
    compiled = _compile(
        status_filter=InboxConversationStatus.OPEN,
        search="50%_off",
        limit=50,
    )
    sql = str(compiled)
    params = list(compiled.params.values())

    assert "WHERE" in sql
    assert sql.count("ILIKE") == 2
    assert "ESCAPE" in sql
    assert InboxConversationStatus.OPEN in params
    assert "%50\\%\\_off%" in params


def test_blank_search_adds_no_filter() -> None:
    sql = str(_compile(search=""))

    assert "ILIKE" not in sql
