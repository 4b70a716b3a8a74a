"""Tests for certificate, domain, firewall, reserved IP, VPC and partner attachment tools."""

import json

import pytest


@pytest.mark.asyncio
async def test_certificate_get_requires_id(fake_api, call_tool):
    result = await call_tool("digitalocean-certificate-get", {"certificate_id": ""})

    assert result.isError
    assert result.content[0].text == "Certificate ID is required"
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_certificate_create_lets_encrypt(fake_api, call_tool):
    fake_api.add("POST", "/certificates", status=201,
                 json_body={"certificate": {"id": "892071a0", "type": "lets_encrypt"}})

    result = await call_tool("digitalocean-certificate-create-lets-encrypt",
                             {"name": "web-cert", "dns_names": ["example.com", "www.example.com"]})

    assert json.loads(result.content[0].text) == {"id": "892071a0", "type": "lets_encrypt"}
    assert fake_api.last_json() == {
        "name": "web-cert",
        "type": "lets_encrypt",
        "dns_names": ["example.com", "www.example.com"],
    }


@pytest.mark.asyncio
async def test_certificate_list(fake_api, call_tool):
    fake_api.add("GET", "/certificates", json_body={"certificates": [{"id": "c1"}]})

    result = await call_tool("digitalocean-certificate-list", {"per_page": 5})

    assert json.loads(result.content[0].text) == [{"id": "c1"}]
    assert fake_api.last_request.url.params["per_page"] == "5"


@pytest.mark.asyncio
async def test_domain_create_and_delete(fake_api, call_tool):
    fake_api.add("POST", "/domains", status=201, json_body={"domain": {"name": "example.com", "ttl": 1800}})
    fake_api.add("DELETE", "/domains/example.com", status=204)

    result = await call_tool("digitalocean-domain-create", {"name": "example.com", "ip_address": "1.2.3.4"})
    assert json.loads(result.content[0].text)["name"] == "example.com"
    assert fake_api.last_json() == {"name": "example.com", "ip_address": "1.2.3.4"}

    result = await call_tool("digitalocean-domain-delete", {"name": "example.com"})
    assert result.content[0].text == "Domain deleted successfully"


@pytest.mark.asyncio
async def test_domain_record_get_requires_record_id(fake_api, call_tool):
    result = await call_tool("digitalocean-domain-record-get", {"domain": "example.com", "record_id": 0})

    assert result.isError
    assert result.content[0].text == "RecordID is required"
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_domain_record_edit(fake_api, call_tool):
    fake_api.add("PUT", "/domains/example.com/records/3352896",
                 json_body={"domain_record": {"id": 3352896, "type": "A", "data": "5.6.7.8"}})

    result = await call_tool("digitalocean-domain-record-edit", {
        "domain": "example.com",
        "record_id": 3352896,
        "record_type": "A",
        "name": "www",
        "data": "5.6.7.8",
    })

    assert json.loads(result.content[0].text)["data"] == "5.6.7.8"
    assert fake_api.last_json() == {"type": "A", "name": "www", "data": "5.6.7.8"}


@pytest.mark.asyncio
async def test_firewall_create(fake_api, call_tool):
    fake_api.add("POST", "/firewalls", status=202, json_body={"firewall": {"id": "fw-1", "status": "waiting"}})

    result = await call_tool("digitalocean-firewall-create", {
        "name": "web",
        "inbound_protocol": "tcp",
        "inbound_port_range": "80",
        "inbound_source": "0.0.0.0/0",
        "outbound_protocol": "tcp",
        "outbound_port_range": "all",
        "outbound_destination": "0.0.0.0/0",
        "droplet_ids": [8043964],
    })

    assert json.loads(result.content[0].text)["id"] == "fw-1"
    assert fake_api.last_json() == {
        "name": "web",
        "inbound_rules": [{"protocol": "tcp", "ports": "80", "sources": {"addresses": ["0.0.0.0/0"]}}],
        "outbound_rules": [{"protocol": "tcp", "ports": "all", "destinations": {"addresses": ["0.0.0.0/0"]}}],
        "droplet_ids": [8043964],
        "tags": [],
    }


@pytest.mark.asyncio
async def test_firewall_add_rules(fake_api, call_tool):
    fake_api.add("POST", "/firewalls/fw-1/rules", status=204)

    result = await call_tool("digitalocean-firewall-add-rules", {
        "firewall_id": "fw-1",
        "inbound_rules": [{"protocol": "tcp", "port_range": "22", "sources": ["10.0.0.0/8"]}],
    })

    assert result.content[0].text == "Rule(s) added to firewall successfully"
    assert fake_api.last_json() == {
        "inbound_rules": [{"protocol": "tcp", "ports": "22", "sources": {"addresses": ["10.0.0.0/8"]}}],
        "outbound_rules": [],
    }


@pytest.mark.asyncio
async def test_firewall_rules_require_at_least_one(fake_api, call_tool):
    result = await call_tool("digitalocean-firewall-remove-rules", {"firewall_id": "fw-1"})

    assert result.isError
    assert result.content[0].text == "At least one inbound or outbound rule must be provided"
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_firewall_remove_tags_sends_body(fake_api, call_tool):
    fake_api.add("DELETE", "/firewalls/fw-1/tags", status=204)

    result = await call_tool("digitalocean-firewall-remove-tags", {"firewall_id": "fw-1", "tags": ["web"]})

    assert result.content[0].text == "Tag(s) removed from firewall successfully"
    assert fake_api.last_request.method == "DELETE"
    assert fake_api.last_json() == {"tags": ["web"]}


@pytest.mark.asyncio
async def test_reserve_ipv6_uses_region_slug(fake_api, call_tool):
    fake_api.add("POST", "/reserved_ipv6", status=201,
                 json_body={"reserved_ipv6": {"ip": "2409:40d0::1", "region_slug": "nyc3"}})

    result = await call_tool("digitalocean-reserved-ip-reserve", {"region": "nyc3", "ip_type": "ipv6"})

    assert json.loads(result.content[0].text)["ip"] == "2409:40d0::1"
    assert fake_api.last_json() == {"region_slug": "nyc3"}


@pytest.mark.asyncio
async def test_reserve_ipv4(fake_api, call_tool):
    fake_api.add("POST", "/reserved_ips", status=202, json_body={"reserved_ip": {"ip": "45.55.96.47"}})

    await call_tool("digitalocean-reserved-ip-reserve", {"region": "nyc3", "ip_type": "ipv4"})

    assert fake_api.last_json() == {"region": "nyc3"}


@pytest.mark.asyncio
async def test_reserved_ip_invalid_type(fake_api, call_tool):
    result = await call_tool("digitalocean-reserved-ip-release", {"ip": "1.2.3.4", "ip_type": "ipv5"})

    assert result.isError
    assert result.content[0].text == "invalid IP type. Use 'ipv4' or 'ipv6'"
    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_reserved_ip_assign(fake_api, call_tool):
    fake_api.add("POST", "/reserved_ips/45.55.96.47/actions", status=201,
                 json_body={"action": {"id": 68212728, "type": "assign_ip"}})

    result = await call_tool("digitalocean-reserved-ip-assign",
                             {"ip": "45.55.96.47", "droplet_id": 8219222, "ip_type": "ipv4"})

    assert json.loads(result.content[0].text)["type"] == "assign_ip"
    assert fake_api.last_json() == {"type": "assign", "droplet_id": 8219222}


@pytest.mark.asyncio
async def test_reserved_ip_release(fake_api, call_tool):
    fake_api.add("DELETE", "/reserved_ips/45.55.96.47", status=204)

    result = await call_tool("digitalocean-reserved-ip-release", {"ip": "45.55.96.47", "ip_type": "ipv4"})

    assert result.content[0].text == "reserved IP released successfully"


@pytest.mark.asyncio
async def test_vpc_members_and_peering(fake_api, call_tool):
    fake_api.add("GET", "/vpcs/vpc-1/members", json_body={"members": [{"urn": "do:droplet:13457723"}]})
    fake_api.add("POST", "/vpc_peerings", status=202, json_body={"vpc_peering": {"id": "p-1"}})

    result = await call_tool("digitalocean-vpc-list-members", {"vpc_id": "vpc-1"})
    assert json.loads(result.content[0].text) == [{"urn": "do:droplet:13457723"}]

    result = await call_tool("digitalocean-vpc-peering-create", {"name": "link", "vpc1": "vpc-1", "vpc2": "vpc-2"})
    assert json.loads(result.content[0].text) == {"id": "p-1"}
    assert fake_api.last_json() == {"name": "link", "vpc_ids": ["vpc-1", "vpc-2"]}


@pytest.mark.asyncio
async def test_partner_attachment_create_and_update(fake_api, call_tool):
    path = "/partner_network_connect/attachments"
    fake_api.add("POST", path, status=202, json_body={"partner_attachment": {"id": "pa-1"}})
    fake_api.add("PATCH", f"{path}/pa-1", json_body={"partner_attachment": {"id": "pa-1", "name": "renamed"}})

    await call_tool("digitalocean-partner-attachment-create", {"name": "pa", "region": "nyc", "bandwidth": 1000})
    assert fake_api.last_json() == {"name": "pa", "region": "nyc", "connection_bandwidth_in_mbps": 1000}

    result = await call_tool("digitalocean-partner-attachment-update",
                             {"attachment_id": "pa-1", "name": "renamed", "vpc_ids": ["vpc-1"]})
    assert json.loads(result.content[0].text)["name"] == "renamed"
    assert fake_api.last_request.method == "PATCH"


@pytest.mark.asyncio
async def test_partner_attachment_service_key(fake_api, call_tool):
    fake_api.add("GET", "/partner_network_connect/attachments/pa-1/service_key",
                 json_body={"service_key": {"value": "secret", "state": "CREATED"}})

    result = await call_tool("digitalocean-partner-attachment-get-service-key", {"attachment_id": "pa-1"})

    assert json.loads(result.content[0].text) == {"value": "secret", "state": "CREATED"}


@pytest.mark.asyncio
async def test_not_found_is_api_error(fake_api, call_tool):
    result = await call_tool("digitalocean-vpc-get", {"vpc_id": "missing"})

    assert result.isError
    assert result.content[0].text.startswith("api error")


@pytest.mark.asyncio
async def test_networking_resources(fake_api, read_resource):
    fake_api.add("GET", "/domains/example.com", json_body={"domain": {"name": "example.com"}})
    fake_api.add("GET", "/domains/example.com/records/5", json_body={"domain_record": {"id": 5}})
    fake_api.add("GET", "/firewalls/fw-1", json_body={"firewall": {"id": "fw-1"}})
    fake_api.add("GET", "/reserved_ips/45.55.96.47", json_body={"reserved_ip": {"ip": "45.55.96.47"}})
    fake_api.add("GET", "/vpc_peerings/p-1", json_body={"vpc_peering": {"id": "p-1"}})

    assert json.loads(await read_resource("domains://example.com")) == {"name": "example.com"}
    assert json.loads(await read_resource("domains://example.com/records/5")) == {"id": 5}
    assert json.loads(await read_resource("firewalls://fw-1")) == {"id": "fw-1"}
    assert json.loads(await read_resource("reserved-ipv4://45.55.96.47")) == {"ip": "45.55.96.47"}
    assert json.loads(await read_resource("vpc-peering://p-1")) == {"id": "p-1"}


@pytest.mark.asyncio
async def test_domain_record_resource_invalid_record(fake_api, read_resource):
    with pytest.raises(Exception):
        await read_resource("domains://example.com/records/abc")
    assert fake_api.requests == []
