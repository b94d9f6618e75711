"""
Search verification.

The only part of a query response the harness reads is the result count
(``response.numFound``). Counts are compared exactly: callers commit and
wait for convergence first, so a mismatch is a real defect.
"""

from typing import Sequence

import msgspec

from convergence.cluster import Endpoint, Node, Target
from convergence.conditions import Condition
from convergence.errors import AssertionMismatch, OperationFailed
from convergence.harness import Harness
from convergence.logging.convergence_logging_models import SearchInfo
from convergence.polling import PollOutcome
from convergence.probes import (
    HTTPProbe,
    HTTPRequest,
    ProbeNegative,
    ProbeOutcome,
    ProbeValue,
)
from convergence.transport import HTTPResponse

from .urls import Params, internal_solr_url, quote_unicode, search_url, urlencode_params


class SearchResponseBody(msgspec.Struct):
    numFound: int


class SearchResult(msgspec.Struct):
    response: SearchResponseBody


def get_count(raw: bytes | str) -> int:
    return msgspec.json.decode(raw, type=SearchResult).response.numFound


def verify_count(expected: int, raw: bytes | str) -> bool:
    return get_count(raw) == expected


def build_search_url(
    endpoint: Endpoint,
    index: str,
    name: str,
    term: str,
    params: Params = "",
    solr: bool = False,
) -> str:
    query = f"q={quote_unicode(name)}:{quote_unicode(term)}&wt=json"
    extra = urlencode_params(params)
    if extra:
        query += f"&{extra}"

    if solr:
        return f"{internal_solr_url(endpoint, index)}/select?{query}"

    return search_url(endpoint, index, query)


async def search(
    harness: Harness,
    endpoint: Endpoint,
    index: str,
    name: str,
    term: str,
    params: Params = "",
    solr: bool = False,
) -> HTTPResponse:
    url = build_search_url(endpoint, index, name, term, params=params, solr=solr)
    await harness.logger.log(SearchInfo(message=f"Run search {url}", index=index))
    return await harness.http.get(url)


async def search_expect(
    harness: Harness,
    endpoint: Endpoint,
    index: str,
    name: str,
    term: str,
    expected: int,
    solr: bool = False,
) -> bool:
    response = await search(harness, endpoint, index, name, term, solr=solr)
    return await _verify_response(harness, index, expected, response)


async def search_expect_shards(
    harness: Harness,
    endpoint: Endpoint,
    index: str,
    name: str,
    term: str,
    shards: Sequence[Endpoint],
    expected: int,
) -> bool:
    if not shards:
        raise ValueError("search_expect_shards requires at least one shard")

    url = internal_solr_url(endpoint, index, name=name, term=term, shards=shards)
    await harness.logger.log(SearchInfo(message=f"Run search {url}", index=index))
    response = await harness.http.get(url)
    return await _verify_response(harness, index, expected, response)


async def assert_search_count(
    harness: Harness,
    endpoint: Endpoint,
    index: str,
    name: str,
    term: str,
    expected: int,
) -> None:
    response = await search(harness, endpoint, index, name, term)
    if response.status != 200:
        raise OperationFailed(f"Search on {index} returned HTTP {response.status}")

    actual = get_count(response.body)
    if actual != expected:
        raise AssertionMismatch(f"search count for {name}:{term} on {index}", expected, actual)


async def _verify_response(
    harness: Harness,
    index: str,
    expected: int,
    response: HTTPResponse,
) -> bool:
    if response.status != 200:
        raise OperationFailed(
            f"Search on {index} returned HTTP {response.status}: {response.text()}"
        )

    actual = get_count(response.body)
    await harness.logger.log(
        SearchInfo(
            message=f"E: {expected}, A: {actual}",
            index=index,
            expected=expected,
            actual=actual,
        )
    )

    return actual == expected


def interpret_search_count(response: HTTPResponse) -> ProbeOutcome:
    if response.status != 200:
        return ProbeNegative(f"HTTP {response.status}")

    return ProbeValue(get_count(response.body))


def search_count_condition(
    harness: Harness,
    index: str,
    name: str,
    term: str,
    expected: int,
) -> Condition:
    """Holds on a node when a query sent to that node returns ``expected`` results."""

    def request_factory(node: Node) -> HTTPRequest:
        return HTTPRequest(
            method="GET",
            url=build_search_url(harness.cluster.http(node), index, name, term),
        )

    probe = HTTPProbe(
        harness.http,
        request_factory,
        interpret=interpret_search_count,
        name=f"search:{index}",
        logger=harness.logger,
    )

    return Condition.from_probe(
        f"search {name}:{term} on {index} returns {expected}",
        probe,
        lambda count: count == expected,
    )


async def wait_for_search_count(
    harness: Harness,
    index: str,
    name: str,
    term: str,
    expected: int,
    target: Target | None = None,
) -> list[PollOutcome]:
    if target is None:
        target = harness.cluster

    return await harness.wait_until(
        target,
        search_count_condition(harness, index, name, term, expected),
    )
