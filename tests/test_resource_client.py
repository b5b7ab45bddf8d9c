"""Tests for the generic resource client: pagination, CRUD, existence checks."""

import json
import re
import threading
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlparse

import pytest
import responses

from linode_client.api.endpoints import EndpointPolicy, NODEBALANCER_CONFIGS, NODEBALANCERS
from linode_client.api.pagination import ListOptions
from linode_client.api.resource_client import ResourceClient
from linode_client.api.transport import Transport
from linode_client.config import APIConfig
from linode_client.exceptions import (
    APIError,
    CancelledError,
    DecodeError,
    EndpointResolutionError,
    NotFoundError,
    is_api_error,
    is_not_found,
)
from linode_client.resources import (
    NodeBalancer,
    NodeBalancerConfig,
    NodeBalancerConfigCreateOptions,
    NodeBalancerCreateOptions,
    NodeBalancerUpdateOptions,
)

BASE = "https://api.linode.com/v4"


def _nb(ident, label=None):
    return {
        "id": ident,
        "label": label or f"nb-{ident}",
        "region": "us-east",
        "client_conn_throttle": 0,
        "created": "2018-01-01T00:01:01",
        "updated": "2018-01-02T00:01:01",
    }


def _paged_callback(records, page_size):
    """Serve *records* split into pages of *page_size*, honouring ?page=."""
    pages = max(1, -(-len(records) // page_size))

    def callback(request):
        query = parse_qs(urlparse(request.url).query)
        page = int(query.get("page", ["1"])[0])
        chunk = records[(page - 1) * page_size:page * page_size]
        body = {"data": chunk, "page": page, "pages": pages, "results": len(records)}
        return 200, {}, json.dumps(body)

    return callback


def _page_numbers():
    return [int(parse_qs(urlparse(c.request.url).query)["page"][0]) for c in responses.calls]


@pytest.fixture
def transport():
    return Transport(APIConfig(token="tok"))


@pytest.fixture
def nodebalancers(transport):
    return ResourceClient(transport, NodeBalancer, NODEBALANCERS)


@pytest.fixture
def configs(transport):
    return ResourceClient(transport, NodeBalancerConfig, NODEBALANCER_CONFIGS)


class TestListPagination:
    @pytest.mark.parametrize("total,page_size", [(6, 6), (6, 2), (6, 1)])
    @responses.activate
    def test_returns_every_record_in_order(self, nodebalancers, total, page_size):
        records = [_nb(i) for i in range(1, total + 1)]
        responses.add_callback(responses.GET, f"{BASE}/nodebalancers", callback=_paged_callback(records, page_size))

        result = nodebalancers.list(options=ListOptions(page_size=page_size))

        assert [nb.id for nb in result] == list(range(1, total + 1))
        assert len(responses.calls) == -(-total // page_size)
        assert _page_numbers() == list(range(1, len(responses.calls) + 1))

    @responses.activate
    def test_three_pages_of_uneven_size(self, nodebalancers):
        records = [_nb(i) for i in range(1, 8)]
        responses.add_callback(responses.GET, f"{BASE}/nodebalancers", callback=_paged_callback(records, 3))

        result = nodebalancers.list(options=ListOptions(page_size=3))

        assert [nb.id for nb in result] == [1, 2, 3, 4, 5, 6, 7]
        assert len(responses.calls) == 3

    @responses.activate
    def test_no_options_follows_pages_field(self, nodebalancers):
        records = [_nb(i) for i in range(1, 5)]
        responses.add_callback(responses.GET, f"{BASE}/nodebalancers", callback=_paged_callback(records, 2))

        result = nodebalancers.list()

        assert [nb.id for nb in result] == [1, 2, 3, 4]
        assert "page_size" not in parse_qs(urlparse(responses.calls[0].request.url).query)

    @responses.activate
    def test_short_page_stops_pagination(self, nodebalancers):
        responses.add(
            responses.GET, f"{BASE}/nodebalancers",
            json={"data": [_nb(1)], "page": 1, "pages": 5, "results": 9},
        )
        result = nodebalancers.list(options=ListOptions(page_size=2))
        assert [nb.id for nb in result] == [1]
        assert len(responses.calls) == 1

    @responses.activate
    def test_empty_collection(self, nodebalancers):
        responses.add(
            responses.GET, f"{BASE}/nodebalancers",
            json={"data": [], "page": 1, "pages": 1, "results": 0},
        )
        assert nodebalancers.list() == []

    @responses.activate
    def test_explicit_page_fetches_only_that_page(self, nodebalancers):
        records = [_nb(i) for i in range(1, 7)]
        responses.add_callback(responses.GET, f"{BASE}/nodebalancers", callback=_paged_callback(records, 2))

        result = nodebalancers.list(options=ListOptions(page=2, page_size=2))

        assert [nb.id for nb in result] == [3, 4]
        assert _page_numbers() == [2]

    @responses.activate
    def test_default_page_size_applied(self, transport):
        client = ResourceClient(transport, NodeBalancer, NODEBALANCERS, default_page_size=50)
        responses.add(responses.GET, f"{BASE}/nodebalancers", json={"data": [], "page": 1, "pages": 1})
        client.list()
        assert parse_qs(urlparse(responses.calls[0].request.url).query)["page_size"] == ["50"]

    @responses.activate
    def test_filter_sent_as_header(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers", json={"data": [], "page": 1, "pages": 1})
        nodebalancers.list(options=ListOptions(filter={"label": "lb1"}))
        assert json.loads(responses.calls[0].request.headers["X-Filter"]) == {"label": "lb1"}

    @responses.activate
    def test_timestamps_normalized_on_every_record(self, nodebalancers):
        bad = _nb(2)
        bad["created"] = "not-a-date"
        bad["updated"] = ""
        responses.add(
            responses.GET, f"{BASE}/nodebalancers",
            json={"data": [_nb(1), bad], "page": 1, "pages": 1, "results": 2},
        )
        first, second = nodebalancers.list()
        assert first.created == datetime(2018, 1, 1, 0, 1, 1, tzinfo=timezone.utc)
        assert second.created is None
        assert second.updated is None

    @responses.activate
    def test_nested_list_uses_parent_path(self, configs):
        responses.add(
            responses.GET, f"{BASE}/nodebalancers/12/configs",
            json={"data": [{"id": 5, "port": 80, "nodebalancer_id": 12}], "page": 1, "pages": 1},
        )
        result = configs.list(12)
        assert result[0].port == 80
        assert result[0].nodebalancer_id == 12

    def test_nested_list_without_parent_aborts(self, configs):
        with pytest.raises(EndpointResolutionError):
            configs.list()

    @responses.activate
    def test_invalid_json_is_decode_error(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers", body="<html>oops</html>")
        with pytest.raises(DecodeError):
            nodebalancers.list()

    @responses.activate
    def test_data_not_a_list_is_decode_error(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers", json={"data": {"id": 1}})
        with pytest.raises(DecodeError):
            nodebalancers.list()

    @responses.activate
    def test_failure_on_later_page_propagates(self, nodebalancers):
        responses.add(
            responses.GET, f"{BASE}/nodebalancers",
            json={"data": [_nb(1)], "page": 1, "pages": 2, "results": 2},
        )
        responses.add(responses.GET, f"{BASE}/nodebalancers", json={"errors": [{"reason": "boom"}]}, status=500)
        with pytest.raises(APIError) as exc_info:
            nodebalancers.list(options=ListOptions(page_size=1))
        assert exc_info.value.status_code == 500


class TestCrud:
    @responses.activate
    def test_get(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers/1", json=_nb(1))
        nb = nodebalancers.get(1)
        assert nb.id == 1
        assert nb.updated == datetime(2018, 1, 2, 0, 1, 1, tzinfo=timezone.utc)

    @responses.activate
    def test_get_not_found(self, nodebalancers):
        responses.add(
            responses.GET, f"{BASE}/nodebalancers/9",
            json={"errors": [{"reason": "Not found"}]}, status=404,
        )
        with pytest.raises(NotFoundError) as exc_info:
            nodebalancers.get(9)
        assert is_not_found(exc_info.value)

    @responses.activate
    def test_get_server_error_is_not_not_found(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers/9", body="internal error", status=500)
        with pytest.raises(APIError) as exc_info:
            nodebalancers.get(9)
        assert not is_not_found(exc_info.value)
        assert is_api_error(exc_info.value)

    @responses.activate
    def test_get_without_id_is_decode_error(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers/1", json={"label": "x"})
        with pytest.raises(DecodeError):
            nodebalancers.get(1)

    @responses.activate
    def test_create_posts_only_present_fields(self, nodebalancers):
        responses.add(responses.POST, f"{BASE}/nodebalancers", json=_nb(7, "lb7"))
        nb = nodebalancers.create(NodeBalancerCreateOptions(label="lb7", region="us-east"))
        assert nb.id == 7
        assert json.loads(responses.calls[0].request.body) == {"label": "lb7", "region": "us-east"}

    @responses.activate
    def test_update_sends_zero_values(self, nodebalancers):
        responses.add(responses.PUT, f"{BASE}/nodebalancers/7", json=_nb(7))
        nodebalancers.update(7, NodeBalancerUpdateOptions(client_conn_throttle=0))
        assert json.loads(responses.calls[0].request.body) == {"client_conn_throttle": 0}

    @responses.activate
    def test_create_nested(self, configs):
        responses.add(
            responses.POST, f"{BASE}/nodebalancers/12/configs",
            json={"id": 3, "port": 8080, "protocol": "http", "nodebalancer_id": 12},
        )
        cfg = configs.create(NodeBalancerConfigCreateOptions(port=8080, protocol="http"), parent_id=12)
        assert cfg.id == 3
        assert cfg.protocol == "http"

    @responses.activate
    def test_delete(self, nodebalancers):
        responses.add(responses.DELETE, f"{BASE}/nodebalancers/7", json={})
        nodebalancers.delete(7)
        assert responses.calls[0].request.method == "DELETE"

    @responses.activate
    def test_delete_nested(self, configs):
        responses.add(responses.DELETE, f"{BASE}/nodebalancers/12/configs/3", status=200, json={})
        configs.delete(3, parent_id=12)

    @responses.activate
    def test_delete_absent_is_not_found(self, nodebalancers):
        responses.add(responses.DELETE, f"{BASE}/nodebalancers/7", json={"errors": [{"reason": "Not found"}]}, status=404)
        with pytest.raises(NotFoundError):
            nodebalancers.delete(7)

    def test_cancelled_before_send(self, nodebalancers):
        cancel = threading.Event()
        cancel.set()
        with responses.RequestsMock() as rsps:
            with pytest.raises(CancelledError):
                nodebalancers.get(1, cancel=cancel)
            assert len(rsps.calls) == 0

    def test_bad_endpoint_template_aborts(self, transport):
        client = ResourceClient(transport, NodeBalancer, EndpointPolicy("broken", ""))
        with pytest.raises(EndpointResolutionError):
            client.get(1)


class TestExistence:
    @responses.activate
    def test_exists_true(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers/1", json=_nb(1))
        assert nodebalancers.exists(1) is True

    @responses.activate
    def test_exists_false_on_404(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers/1", json={"errors": []}, status=404)
        assert nodebalancers.exists(1) is False

    @responses.activate
    def test_exists_propagates_other_errors(self, nodebalancers):
        responses.add(responses.GET, f"{BASE}/nodebalancers/1", status=503)
        with pytest.raises(APIError):
            nodebalancers.exists(1)

    @responses.activate
    def test_delete_if_exists_treats_404_as_gone(self, nodebalancers):
        responses.add(responses.DELETE, f"{BASE}/nodebalancers/1", status=404)
        assert nodebalancers.delete_if_exists(1) is False

    @responses.activate
    def test_delete_if_exists_deletes(self, nodebalancers):
        responses.add(responses.DELETE, f"{BASE}/nodebalancers/1", json={})
        assert nodebalancers.delete_if_exists(1) is True


class FakeNodeBalancerAPI:
    """In-memory stand-in for the NodeBalancer endpoints."""

    ITEM = re.compile(rf"{re.escape(BASE)}/nodebalancers/(\d+)$")

    def __init__(self, rsps, next_id=123):
        self.store = {}
        self.next_id = next_id
        rsps.add_callback(responses.POST, f"{BASE}/nodebalancers", callback=self.create)
        rsps.add_callback(responses.GET, self.ITEM, callback=self.get)
        rsps.add_callback(responses.PUT, self.ITEM, callback=self.update)
        rsps.add_callback(responses.DELETE, self.ITEM, callback=self.delete)

    def _id(self, request):
        return int(self.ITEM.match(request.url).group(1))

    @staticmethod
    def _not_found():
        return 404, {}, json.dumps({"errors": [{"reason": "Not found"}]})

    def create(self, request):
        record = {"id": self.next_id, **json.loads(request.body),
                  "created": "2018-01-01T00:01:01", "updated": "2018-01-01T00:01:01"}
        self.store[self.next_id] = record
        self.next_id += 1
        return 200, {}, json.dumps(record)

    def get(self, request):
        record = self.store.get(self._id(request))
        return (200, {}, json.dumps(record)) if record else self._not_found()

    def update(self, request):
        record = self.store.get(self._id(request))
        if record is None:
            return self._not_found()
        record.update(json.loads(request.body))
        record["updated"] = "2018-01-03T10:00:00"
        return 200, {}, json.dumps(record)

    def delete(self, request):
        if self.store.pop(self._id(request), None) is None:
            return self._not_found()
        return 200, {}, "{}"


class TestEndToEnd:
    def test_create_get_update_delete(self, nodebalancers):
        with responses.RequestsMock() as rsps:
            FakeNodeBalancerAPI(rsps)

            created = nodebalancers.create(
                NodeBalancerCreateOptions(label="lb1", region="us-east", client_conn_throttle=20),
            )
            assert created.id == 123
            assert created.client_conn_throttle == 20

            assert nodebalancers.get(123) == created

            updated = nodebalancers.update(123, NodeBalancerUpdateOptions(client_conn_throttle=0))
            assert updated.client_conn_throttle == 0
            assert updated.label == "lb1"
            assert updated.updated == datetime(2018, 1, 3, 10, 0, tzinfo=timezone.utc)

            nodebalancers.delete(123)

            with pytest.raises(APIError) as exc_info:
                nodebalancers.get(123)
            assert is_not_found(exc_info.value)
            assert nodebalancers.exists(123) is False
