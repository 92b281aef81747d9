"""Tests for the Base URL Source and service account REST services."""
import pytest

from fram_provider.core.fram import (
    AlreadyExistsError,
    BaseURLSourceService,
    FramAPIError,
    NotFoundError,
    ServiceAccountService,
    normalize_realm,
    realm_path,
)
from fram_provider.core.transformer import BaseURLSource, ServiceAccount


@pytest.mark.parametrize(
    "realm, expected",
    [
        (None, "/json/realms/root"),
        ("/", "/json/realms/root"),
        ("root", "/json/realms/root"),
        ("/alpha", "/json/realms/root/realms/alpha"),
        ("alpha/", "/json/realms/root/realms/alpha"),
        ("/alpha/child", "/json/realms/root/realms/alpha/realms/child"),
    ],
)
def test_realm_path(realm, expected):
    assert realm_path(realm) == expected


def test_normalize_realm():
    assert normalize_realm("alpha/") == "/alpha"
    assert normalize_realm("/root") == "/"
    assert normalize_realm("") == "/"


# ─────────────────────────────────────────────────────────────────────────────
# Base URL Source
# ─────────────────────────────────────────────────────────────────────────────
def test_baseurl_get(fram_client, fake_response):
    fram_client.get.return_value = fake_response({
        "_id": "",
        "source": "FIXED_VALUE",
        "contextPath": "/am",
        "fixedValue": "https://sso.example.com",
        "extensionClassName": "",
    })
    bus = BaseURLSourceService(fram_client).get()

    fram_client.get.assert_called_once_with("/json/realms/root/realms/alpha/realm-config/services/baseurl")
    assert bus == BaseURLSource("FIXED_VALUE", "/am", "https://sso.example.com", "")


def test_baseurl_get_missing(fram_client):
    fram_client.get.side_effect = FramAPIError(404, '{"code":404}', "x")
    with pytest.raises(NotFoundError):
        BaseURLSourceService(fram_client).get()


def test_baseurl_get_other_error_propagates(fram_client):
    fram_client.get.side_effect = FramAPIError(500, "boom", "x")
    with pytest.raises(FramAPIError):
        BaseURLSourceService(fram_client).get()


def test_baseurl_create_posts_create_action(fram_client, fake_response):
    fram_client.post.return_value = fake_response({"source": "REQUEST_VALUES", "contextPath": "/am"}, status_code=201)
    bus = BaseURLSource(source="REQUEST_VALUES", context_path="/am")

    result = BaseURLSourceService(fram_client).create(bus)

    path = fram_client.post.call_args.args[0]
    assert path.endswith("/realms/alpha/realm-config/services/baseurl")
    assert fram_client.post.call_args.kwargs["params"] == {"_action": "create"}
    assert fram_client.post.call_args.kwargs["json"]["fixedValue"] == ""
    assert result.source == "REQUEST_VALUES"


def test_baseurl_create_without_body_returns_none(fram_client, fake_response):
    fram_client.post.return_value = fake_response(None, status_code=201)
    assert BaseURLSourceService(fram_client).create(BaseURLSource()) is None


def test_baseurl_update_puts_full_representation(fram_client, fake_response):
    fram_client.put.return_value = fake_response({"source": "FORWARDED_HEADER"})
    BaseURLSourceService(fram_client).update(BaseURLSource(source="FORWARDED_HEADER"))
    assert set(fram_client.put.call_args.kwargs["json"]) == {
        "source", "contextPath", "fixedValue", "extensionClassName",
    }


def test_baseurl_delete(fram_client, fake_response):
    fram_client.delete.return_value = fake_response(None, status_code=200)
    assert BaseURLSourceService(fram_client).delete() is True


def test_baseurl_delete_missing(fram_client):
    fram_client.delete.side_effect = FramAPIError(404, "", "x")
    assert BaseURLSourceService(fram_client).delete() is False


def test_baseurl_resource_id_is_realm(fram_client):
    fram_client.realm = "alpha/"
    assert BaseURLSourceService(fram_client).resource_id() == "/alpha"


# ─────────────────────────────────────────────────────────────────────────────
# Service accounts
# ─────────────────────────────────────────────────────────────────────────────
SVCACCT = {
    "_id": "4f1e",
    "_rev": "1",
    "name": "ci",
    "description": "pipeline",
    "scopes": ["fr:idm:*", "fr:am:*"],
    "accountStatus": "Active",
    "jwks": '{"keys":[]}',
}


def test_svcacct_read(fram_client, fake_response):
    fram_client.idm_get.return_value = fake_response(SVCACCT)
    account = ServiceAccountService(fram_client).read("4f1e")

    fram_client.idm_get.assert_called_once_with("/managed/svcacct/4f1e")
    assert account.scopes == ["fr:idm:*", "fr:am:*"]
    assert account.account_status == "Active"


def test_svcacct_read_quotes_id(fram_client, fake_response):
    fram_client.idm_get.return_value = fake_response(SVCACCT)
    ServiceAccountService(fram_client).read("a/b")
    fram_client.idm_get.assert_called_once_with("/managed/svcacct/a%2Fb")


def test_svcacct_read_missing(fram_client):
    fram_client.idm_get.side_effect = FramAPIError(404, "", "x")
    with pytest.raises(NotFoundError):
        ServiceAccountService(fram_client).read("nope")


def test_svcacct_create(fram_client, fake_response):
    fram_client.idm_post.return_value = fake_response(SVCACCT, status_code=201)
    account = ServiceAccount(name="ci", description="pipeline", scopes=["fr:idm:*"],
                             account_status="Active", jwks='{"keys":[]}')

    created = ServiceAccountService(fram_client).create(account)

    args, kwargs = fram_client.idm_post.call_args
    assert args == ("/managed/svcacct",)
    assert kwargs["params"] == {"_action": "create"}
    assert "_id" not in kwargs["json"]
    assert kwargs["json"]["accountStatus"] == "Active"
    assert created.id == "4f1e"


def test_svcacct_create_conflict(fram_client):
    fram_client.idm_post.side_effect = FramAPIError(409, "", "x")
    with pytest.raises(AlreadyExistsError):
        ServiceAccountService(fram_client).create(ServiceAccount(name="ci"))


def test_svcacct_update(fram_client, fake_response):
    fram_client.idm_put.return_value = fake_response(dict(SVCACCT, description="changed"))
    updated = ServiceAccountService(fram_client).update("4f1e", ServiceAccount(id="4f1e", description="changed"))
    assert fram_client.idm_put.call_args.args == ("/managed/svcacct/4f1e",)
    assert updated.description == "changed"


def test_svcacct_update_missing(fram_client):
    fram_client.idm_put.side_effect = FramAPIError(404, "", "x")
    with pytest.raises(NotFoundError):
        ServiceAccountService(fram_client).update("4f1e", ServiceAccount())


def test_svcacct_delete(fram_client, fake_response):
    fram_client.idm_delete.return_value = fake_response(SVCACCT)
    assert ServiceAccountService(fram_client).delete("4f1e") is True
    fram_client.idm_delete.side_effect = FramAPIError(404, "", "x")
    assert ServiceAccountService(fram_client).delete("4f1e") is False
