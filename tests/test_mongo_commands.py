import pytest

from formbridge.adapters.mongo_commands import Aggregate, Count, Delete, Distinct, Find, Insert, Raw, Update
from formbridge.core.errors import ConfigurationTypeError, QuerySyntaxError
from formbridge.core.services.templates import generate_collection_templates


def test_find_defaults_filter_and_limit():
    command = Find({"command": "FIND", "collection": "users"})

    assert command.validate() == (True, [])
    assert command.defaulted_fields == ["Query", "Limit"]
    assert command.render() == {"find": "users", "filter": {}, "limit": 10, "batchSize": 10}


def test_find_renders_every_option_in_order():
    command = Find(
        {
            "collection": "users",
            "find": {
                "query": "{ age: { $gt: 30 } }",
                "sort": '{"name": 1}',
                "projection": '{"name": 1}',
                "limit": " 5 ",
                "skip": "20",
            },
        }
    )
    document = command.render()

    assert list(document) == ["find", "filter", "sort", "projection", "limit", "batchSize", "skip"]
    assert document["filter"] == {"age": {"$gt": 30}}
    assert document["limit"] == 5
    assert document["skip"] == 20


def test_find_response_unwraps_first_batch():
    command = Find({"collection": "users"})
    assert command.transform_response({"cursor": {"firstBatch": [{"a": 1}]}, "ok": 1}) == [{"a": 1}]


def test_find_skip_must_fit_in_64_bits():
    with pytest.raises(ConfigurationTypeError):
        Find({"collection": "users", "find": {"skip": str(2**63)}})


def test_missing_collection_is_reported_first():
    assert Delete({"delete": {"query": "{}"}}).validate() == (False, ["Collection"])


@pytest.mark.parametrize(
    "limit,expected",
    [("ALL", 0), ("SINGLE", 1), (None, 1), ("all", 1), (" ALL ", 0)],
)
def test_delete_limit(limit, expected):
    form_data = {"collection": "users", "delete": {"query": '{"a": 1}'}}
    if limit is not None:
        form_data["delete"]["limit"] = limit
    document = Delete(form_data).render()
    assert document == {"delete": "users", "deletes": [{"q": {"a": 1}, "limit": expected}]}


def test_delete_requires_a_query():
    assert Delete({"collection": "users"}).validate() == (False, ["Query"])


def test_update_multi_flag_and_required_fields():
    assert Update({"collection": "users"}).validate() == (False, ["Query", "Update"])

    command = Update(
        {
            "collection": "users",
            "updateMany": {"query": "{}", "update": '{"$set": {"a": 1}}', "limit": "ALL"},
        }
    )
    assert command.render() == {
        "update": "users",
        "updates": [{"q": {}, "u": {"$set": {"a": 1}}, "multi": True}],
    }


def test_insert_accepts_one_document_or_many():
    one = Insert({"collection": "users", "insert": {"documents": '{"a": 1}'}})
    many = Insert({"collection": "users", "insert": {"documents": '[{"a": 1}, {"a": 2}]'}})

    assert one.render()["documents"] == [{"a": 1}]
    assert many.render()["documents"] == [{"a": 1}, {"a": 2}]
    assert Insert({"collection": "users"}).validate() == (False, ["Documents"])


def test_insert_rejects_non_documents():
    with pytest.raises(QuerySyntaxError):
        Insert({"collection": "users", "insert": {"documents": "[1, 2]"}}).render()


def test_count_distinct_and_aggregate():
    assert Count({"collection": "users"}).render() == {"count": "users", "query": {}}
    assert Count({"collection": "users"}).transform_response({"n": 3, "ok": 1}) == {"n": 3}

    distinct = Distinct({"collection": "users", "distinct": {"key": "city"}})
    assert distinct.render() == {"distinct": "users", "key": "city", "query": {}}
    assert distinct.transform_response({"values": ["Oslo"], "ok": 1}) == ["Oslo"]
    assert Distinct({"collection": "users"}).validate() == (False, ["Key"])

    aggregate = Aggregate({"collection": "users", "aggregate": {"arrayPipelines": '{"$match": {}}'}})
    assert aggregate.render() == {
        "aggregate": "users",
        "pipeline": [{"$match": {}}],
        "cursor": {"batchSize": 10},
    }
    assert Aggregate({"collection": "users"}).validate() == (False, ["Array of Pipelines"])


def test_raw_body_is_the_whole_command():
    command = Raw({"body": '{ ping: 1 }'})
    assert command.validate() == (True, [])
    assert command.render() == {"ping": 1}
    assert Raw({}).validate() == (False, ["Body"])


def test_render_does_not_mutate_the_command():
    command = Find({"collection": "users", "find": {"query": '{"a": 1}'}})
    first = command.render()
    first["filter"]["a"] = 2
    assert command.render()["filter"] == {"a": 1}


def test_collection_templates_follow_command_order():
    templates = generate_collection_templates("users", {"_id": "x", "age": 3, "city": "Oslo"})

    assert [t.title for t in templates] == [
        "Find",
        "Find by ID",
        "Insert",
        "Update",
        "Delete",
        "Count",
        "Distinct",
        "Aggregate",
    ]
    find = templates[0].configuration
    assert find["command"] == "FIND"
    assert find["collection"] == "users"
    assert find["find"]["query"] == '{ "city": "Oslo"}'
    assert templates[5].configuration["count"]["query"] == '{"_id": {"$exists": true}}'


def test_template_queries_render():
    for template in generate_collection_templates("users"):
        if template.title in ("Find", "Count", "Aggregate", "Insert"):
            command = {
                "Find": Find,
                "Count": Count,
                "Aggregate": Aggregate,
                "Insert": Insert,
            }[template.title](template.configuration)
            assert command.validate()[0]
            assert command.render()
