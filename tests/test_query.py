"""Tests for paperplane.http.query — nested query string parsing."""

from paperplane.http.query import parse_query


class TestFlat:
    def test_empty(self) -> None:
        assert parse_query("") == {}
        assert parse_query(b"") == {}

    def test_simple_pairs(self) -> None:
        assert parse_query("q=hello&page=2") == {"q": "hello", "page": "2"}

    def test_bytes_input(self) -> None:
        assert parse_query(b"q=caf%C3%A9") == {"q": "café"}

    def test_leading_question_mark(self) -> None:
        assert parse_query("?a=1") == {"a": "1"}

    def test_key_without_value(self) -> None:
        assert parse_query("flag") == {"flag": ""}

    def test_plus_decodes_to_space(self) -> None:
        assert parse_query("q=hello+world") == {"q": "hello world"}

    def test_repeated_key_becomes_list(self) -> None:
        assert parse_query("tag=a&tag=b&tag=c") == {"tag": ["a", "b", "c"]}

    def test_empty_pairs_skipped(self) -> None:
        assert parse_query("a=1&&b=2&") == {"a": "1", "b": "2"}


class TestNested:
    def test_object_notation(self) -> None:
        assert parse_query("a[b]=1") == {"a": {"b": "1"}}

    def test_deep_object(self) -> None:
        assert parse_query("a[b][c]=1&a[b][d]=2") == {"a": {"b": {"c": "1", "d": "2"}}}

    def test_bracket_array(self) -> None:
        assert parse_query("a[]=1&a[]=2") == {"a": ["1", "2"]}

    def test_indexed_array(self) -> None:
        assert parse_query("a[1]=y&a[0]=x") == {"a": ["x", "y"]}

    def test_index_above_limit_is_key(self) -> None:
        assert parse_query("a[21]=x") == {"a": {"21": "x"}}

    def test_encoded_brackets(self) -> None:
        assert parse_query("a%5Bb%5D=1") == {"a": {"b": "1"}}

    def test_array_of_objects(self) -> None:
        result = parse_query("items[0][name]=a&items[1][name]=b")
        assert result == {"items": [{"name": "a"}, {"name": "b"}]}

    def test_depth_capped(self) -> None:
        result = parse_query("a[b][c][d][e][f][g]=1")
        assert result == {"a": {"b": {"c": {"d": {"e": {"f": {"[g]": "1"}}}}}}}

    def test_custom_depth(self) -> None:
        assert parse_query("a[b][c]=1", depth=1) == {"a": {"b": {"[c]": "1"}}}


class TestLimits:
    def test_parameter_limit(self) -> None:
        query = "&".join(f"k{i}=v" for i in range(1200))
        assert len(parse_query(query)) == 1000

    def test_custom_parameter_limit(self) -> None:
        assert parse_query("a=1&b=2&c=3", parameter_limit=2) == {"a": "1", "b": "2"}
