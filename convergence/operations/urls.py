from typing import Mapping, Sequence
from urllib.parse import quote, quote_plus, urlencode

from convergence.cluster import Endpoint

Bucket = str | tuple[str, str]
Params = str | Mapping[str, object] | Sequence[tuple[str, object]]


def quote_unicode(value: str | bytes) -> str:
    if isinstance(value, bytes):
        value = value.decode("utf-8")

    return quote_plus(value, safe="*")


def urlencode_params(params: Params) -> str:
    """
    Encode a mapping or a sequence of pairs as a query string. A string is
    assumed to be encoded already and is returned as is.
    """
    if isinstance(params, str):
        return params

    if isinstance(params, Mapping):
        params = list(params.items())

    return urlencode([(key, str(value)) for key, value in params])


def index_url(endpoint: Endpoint, index: str, timeout: int | None = None) -> str:
    url = f"{endpoint.base_url}/search/index/{quote(index)}"
    if timeout is not None:
        url += f"?timeout={timeout}"

    return url


def schema_url(endpoint: Endpoint, name: str) -> str:
    return f"{endpoint.base_url}/search/schema/{quote(name)}"


def search_url(endpoint: Endpoint, index: str, params: Params = "") -> str:
    query = urlencode_params(params)
    url = f"{endpoint.base_url}/search/query/{quote(index)}"
    if query:
        url += f"?{query}"

    return url


def internal_solr_url(
    endpoint: Endpoint,
    index: str,
    name: str | None = None,
    term: str | None = None,
    shards: Sequence[Endpoint] | None = None,
) -> str:
    """
    URL of the engine's internal endpoint for ``index``. With ``shards``
    it is a distributed select across the given shard endpoints.
    """
    base = f"{endpoint.base_url}/internal_solr/{quote(index)}"
    if not shards:
        return base

    shard_urls = ",".join(
        internal_solr_url(Endpoint(endpoint.host, shard.port, endpoint.scheme), index)
        for shard in shards
    )
    name = quote_unicode(name) if name is not None else "*"
    term = quote_unicode(term) if term is not None else "*"
    return f"{base}/select?wt=json&q={name}:{term}&shards={shard_urls}"


def entropy_data_url(endpoint: Endpoint, index: str, params: Params) -> str:
    return (
        f"{endpoint.base_url}/internal_solr/{quote(index)}/entropy_data"
        f"?{urlencode_params(params)}"
    )


def bucket_type_url(endpoint: Endpoint, bucket_type: str) -> str:
    return f"{endpoint.base_url}/types/{quote(bucket_type)}/props"


def object_url(endpoint: Endpoint, bucket: Bucket, key: str) -> str:
    if isinstance(bucket, tuple):
        bucket_type, bucket_name = bucket
        return (
            f"{endpoint.base_url}/types/{quote(bucket_type)}"
            f"/buckets/{quote(bucket_name)}/keys/{quote(key)}"
        )

    return f"{endpoint.base_url}/buckets/{quote(bucket)}/keys/{quote(key)}"
