import pytest

from tidestudio.risk import classify, split_statements


@pytest.mark.parametrize("query", [
    "DROP TABLE users",
    "delete from x",
    "UPDATE t SET a=1 WHERE 1=1",
    "truncate table logs",
    "ALTER TABLE users ADD COLUMN age int",
    "DELETE FROM users WHERE 1=1",
    "update t\nset a = 1\nwhere 1 = 1",
])
def test_dangerous_queries(query):
    assert classify(query) is True


@pytest.mark.parametrize("query", [
    "SELECT * FROM users",
    "insert into t values (1)",
    "UPDATE t SET a=1 WHERE id = 3",
    "SELECT dropped_at FROM audits",
    "select * from deleted_items",
    "",
])
def test_safe_queries(query):
    assert classify(query) is False


def test_non_string_input_does_not_raise():
    assert classify(None) is False
    assert classify(12) is False


def test_where_clause_scoped_to_its_statement():
    assert classify("UPDATE t SET a=1; SELECT * FROM x WHERE 1=1") is False
    assert classify("SELECT 1; UPDATE t SET a=1 WHERE 1=1") is True


def test_semicolon_inside_literal_does_not_split_statement():
    assert classify("UPDATE t SET a=';' WHERE 1=1") is True


def test_split_statements():
    assert split_statements("select 1; select ';' ;  ;select 2") == [
        "select 1", " select ';' ", "select 2",
    ]
