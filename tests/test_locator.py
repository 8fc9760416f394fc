import pytest

from athena_query.core import InvalidResultUri
from athena_query.storage import ResultAddress, ResultLocator, resolve

EXPECTED = ResultAddress("my-bucket", "results/q1.csv")


@pytest.mark.parametrize("uri", [
    "s3://my-bucket/results/q1.csv",
    "https://my-bucket.s3.eu-west-1.amazonaws.com/results/q1.csv",
    "https://s3.eu-west-1.amazonaws.com/my-bucket/results/q1.csv",
])
def test_all_shapes_resolve_to_same_address(uri):
    assert resolve(uri) == EXPECTED


@pytest.mark.parametrize("style", ["s3", "virtual", "path"])
@pytest.mark.parametrize("region", [None, "us-east-1"])
def test_rendered_address_resolves_back(style, region):
    address = ResultAddress("b", "k/obj.csv")
    assert resolve(address.to_uri(style, region)) == address


def test_virtual_hosted_legacy_dash_region():
    assert resolve("https://my-bucket.s3-eu-west-1.amazonaws.com/results/q1.csv") == EXPECTED


def test_virtual_hosted_bucket_with_dots():
    address = resolve("https://logs.example.com.s3.amazonaws.com/a/b.csv")
    assert address == ResultAddress("logs.example.com", "a/b.csv")


def test_path_style_global_endpoint():
    assert resolve("https://s3.amazonaws.com/my-bucket/results/q1.csv") == EXPECTED


def test_https_key_is_percent_decoded():
    address = resolve("https://my-bucket.s3.amazonaws.com/results/my%20file.csv")
    assert address.key == "results/my file.csv"


def test_s3_key_keeps_nested_segments():
    address = resolve("s3://my-bucket/a/b/c/result.csv")
    assert address.bucket == "my-bucket"
    assert address.key == "a/b/c/result.csv"


@pytest.mark.parametrize("uri", [
    "s3://my-bucket",
    "s3://my-bucket/",
    "s3:///results/q1.csv",
    "https://my-bucket.s3.amazonaws.com/",
    "https://s3.amazonaws.com/my-bucket",
    "ftp://my-bucket/results/q1.csv",
    "not a url",
])
def test_invalid_uris(uri):
    with pytest.raises(InvalidResultUri):
        resolve(uri)


def test_filename():
    assert ResultAddress("b", "results/q1.csv").filename == "q1.csv"
    assert ResultAddress("b", "q1.csv").filename == "q1.csv"
    assert ResultAddress("b", "results/").filename is None


def test_unknown_style():
    with pytest.raises(ValueError):
        ResultAddress("b", "k").to_uri("ftp")


def test_locator_object():
    assert ResultLocator().resolve("s3://my-bucket/results/q1.csv") == EXPECTED
