import pytest
from s3_public_proxy import TargetDescriptor, translate

ENDPOINT = "s3.example.com"
BUCKET = "assets"


@pytest.mark.parametrize(
    "path,query,expected",
    [
        ("/", "", "https://s3.example.com/assets"),
        ("/foo/bar.jpg", "", "https://s3.example.com/assets/foo/bar.jpg"),
        ("/foo/", "", "https://s3.example.com/assets/foo/"),
        ("/", "list-type=2", "https://s3.example.com/assets?list-type=2"),
        ("/a.txt", "?versionId=1", "https://s3.example.com/assets/a.txt?versionId=1"),
        ("/cat%20one.jpg", "", "https://s3.example.com/assets/cat%20one.jpg"),
        ("//double", "", "https://s3.example.com/assets//double"),
    ],
)
def test_translate(path: str, query: str, expected: str) -> None:
    assert translate(path, query, ENDPOINT, BUCKET) == expected


def test_translate_keeps_endpoint_port() -> None:
    assert (
        translate("/k", "", "localhost:9000", BUCKET)
        == "https://localhost:9000/assets/k"
    )


def test_translate_does_not_validate() -> None:
    url = translate("/<weird>", "", ENDPOINT, "Not_A Bucket")
    assert url == "https://s3.example.com/Not_A Bucket/<weird>"


def test_target_descriptor_normalizes_root() -> None:
    target = TargetDescriptor.from_request(
        path="/", query="", endpoint=ENDPOINT, bucket=BUCKET
    )
    assert target == TargetDescriptor(endpoint=ENDPOINT, bucket=BUCKET)
    assert target.path == ""
    assert target.url == "https://s3.example.com/assets"


def test_target_descriptor_keeps_raw_query() -> None:
    target = TargetDescriptor.from_request(
        path="/k", query="b=2&a=1", endpoint=ENDPOINT, bucket=BUCKET
    )
    assert target.raw_query == "b=2&a=1"
    assert target.url == "https://s3.example.com/assets/k?b=2&a=1"
