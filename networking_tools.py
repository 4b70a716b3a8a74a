"""
DigitalOcean networking tools and resources.

Capabilities:
- Certificates (custom and Let's Encrypt)
- Domains and DNS records
- Cloud firewalls (rules, droplet and tag assignment)
- Reserved IPv4 / IPv6 addresses and their actions
- VPCs, VPC peerings and partner attachments

Resources:
    certificates://{id}
    domains://{name}
    domains://{name}/records/{record_id}
    firewalls://{id}
    reserved-ipv4://{ip}
    reserved-ipv6://{ip}          (IPv6 may be written in brackets)
    vpcs://{id}
    vpc-peering://{id}
    partner-attachment://{id}
"""

import logging
from typing import Any, Dict, List, Optional

from fastmcp.exceptions import ToolError
from pydantic import BaseModel, Field

from app.core.digitalocean import DigitalOceanClient
from app.core.extractor import (
    InvalidURIError, extract_domain_and_record_from_uri, extract_ip_from_uri,
    extract_string_id_from_uri,
)
from app.core.tooling import (
    API_ERRORS, api_error, destructive, page_options, read_only, resource_error,
    to_json, tool_annotations,
)

logger = logging.getLogger(__name__)

PARTNER_ATTACHMENTS = "/partner_network_connect/attachments"

# ip_type -> (endpoint, root key, region field)
RESERVED_IP_TYPES = {
    "ipv4": ("/reserved_ips", "reserved_ip", "region"),
    "ipv6": ("/reserved_ipv6", "reserved_ipv6", "region_slug"),
}


class InboundRule(BaseModel):
    protocol: str = Field(..., description="Protocol (tcp, udp, icmp)")
    port_range: str = Field(..., description="Port range (e.g., '80', '443', '8000-8080')")
    sources: List[str] = Field(..., description="Source IP addresses or CIDR blocks")

    def to_api(self) -> Dict[str, Any]:
        return {"protocol": self.protocol, "ports": self.port_range,
                "sources": {"addresses": self.sources}}


class OutboundRule(BaseModel):
    protocol: str = Field(..., description="Protocol (tcp, udp, icmp)")
    port_range: str = Field(..., description="Port range (e.g., '80', '443', '8000-8080')")
    destinations: List[str] = Field(..., description="Destination IP addresses or CIDR blocks")

    def to_api(self) -> Dict[str, Any]:
        return {"protocol": self.protocol, "ports": self.port_range,
                "destinations": {"addresses": self.destinations}}


def reserved_ip_type(ip_type: str):
    try:
        return RESERVED_IP_TYPES[ip_type]
    except KeyError:
        raise ToolError("invalid IP type. Use 'ipv4' or 'ipv6'") from None


def rules_body(inbound_rules: Optional[List[InboundRule]],
               outbound_rules: Optional[List[OutboundRule]]) -> Dict[str, Any]:
    if not inbound_rules and not outbound_rules:
        raise ToolError("At least one inbound or outbound rule must be provided")
    return {
        "inbound_rules": [r.to_api() for r in inbound_rules or []],
        "outbound_rules": [r.to_api() for r in outbound_rules or []],
    }


def register_networking_tools(mcp, client: DigitalOceanClient):
    """Register certificate, domain, firewall, reserved IP, VPC and partner attachment tools."""

    async def fetch(endpoint: str, key: str, params: Optional[Dict[str, Any]] = None) -> str:
        try:
            data = await client.get(endpoint, params=params)
        except API_ERRORS as e:
            raise api_error(e) from e
        return to_json((data or {}).get(key))

    async def send(method: str, endpoint: str, body: Any, key: Optional[str] = None) -> Any:
        try:
            data = await client.request(method, endpoint, json_body=body)
        except API_ERRORS as e:
            raise api_error(e) from e
        return (data or {}).get(key) if key else data

    async def remove(endpoint: str, message: str, body: Any = None) -> str:
        try:
            await client.delete(endpoint, json_body=body)
        except API_ERRORS as e:
            raise api_error(e) from e
        return message

    # =========================================================================
    # CERTIFICATES
    # =========================================================================

    @mcp.tool(name="digitalocean-certificate-get", annotations=read_only("Get Certificate"))
    async def digitalocean_certificate_get(
        certificate_id: str = Field(..., description="ID of the certificate"),
    ) -> str:
        """Get certificate information by ID."""
        if not certificate_id:
            raise ToolError("Certificate ID is required")
        return await fetch(f"/certificates/{certificate_id}", "certificate")

    @mcp.tool(name="digitalocean-certificate-list", annotations=read_only("List Certificates"))
    async def digitalocean_certificate_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List certificates with pagination."""
        return await fetch("/certificates", "certificates", page_options(page, per_page, 20))

    @mcp.tool(name="digitalocean-certificate-create-custom",
              annotations=tool_annotations("Create Custom Certificate"))
    async def digitalocean_certificate_create_custom(
        name: str = Field(..., description="Name of the certificate"),
        private_key: str = Field(..., description="PEM-formatted private key"),
        leaf_certificate: str = Field(..., description="PEM-formatted leaf certificate"),
        certificate_chain: str = Field(..., description="PEM-formatted certificate chain"),
    ) -> str:
        """Upload a custom SSL certificate."""
        body = {
            "name": name,
            "type": "custom",
            "private_key": private_key,
            "leaf_certificate": leaf_certificate,
            "certificate_chain": certificate_chain,
        }
        return to_json(await send("POST", "/certificates", body, "certificate"))

    @mcp.tool(name="digitalocean-certificate-create-lets-encrypt",
              annotations=tool_annotations("Create Let's Encrypt Certificate"))
    async def digitalocean_certificate_create_lets_encrypt(
        name: str = Field(..., description="Name of the certificate"),
        dns_names: List[str] = Field(..., description="DNS names the certificate covers"),
    ) -> str:
        """Create a certificate issued by Let's Encrypt for domains managed on DigitalOcean."""
        body = {"name": name, "type": "lets_encrypt", "dns_names": dns_names}
        return to_json(await send("POST", "/certificates", body, "certificate"))

    @mcp.tool(name="digitalocean-certificate-delete", annotations=destructive("Delete Certificate"))
    async def digitalocean_certificate_delete(
        certificate_id: str = Field(..., description="ID of the certificate to delete"),
    ) -> str:
        """Delete a certificate."""
        return await remove(f"/certificates/{certificate_id}", "Certificate deleted successfully")

    # =========================================================================
    # DOMAINS & RECORDS
    # =========================================================================

    @mcp.tool(name="digitalocean-domain-get", annotations=read_only("Get Domain"))
    async def digitalocean_domain_get(
        name: str = Field(..., description="Name of the domain"),
    ) -> str:
        """Get domain information by name."""
        if not name:
            raise ToolError("Domain name is required")
        return await fetch(f"/domains/{name}", "domain")

    @mcp.tool(name="digitalocean-domain-list", annotations=read_only("List Domains"))
    async def digitalocean_domain_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List domains with pagination."""
        return await fetch("/domains", "domains", page_options(page, per_page, 20))

    @mcp.tool(name="digitalocean-domain-create", annotations=tool_annotations("Create Domain"))
    async def digitalocean_domain_create(
        name: str = Field(..., description="Name of the domain"),
        ip_address: str = Field(..., description="IP address for the domain's apex A record"),
    ) -> str:
        """Add a domain to DigitalOcean DNS."""
        body = {"name": name, "ip_address": ip_address}
        return to_json(await send("POST", "/domains", body, "domain"))

    @mcp.tool(name="digitalocean-domain-delete", annotations=destructive("Delete Domain"))
    async def digitalocean_domain_delete(
        name: str = Field(..., description="Name of the domain to delete"),
    ) -> str:
        """Delete a domain and all of its records."""
        return await remove(f"/domains/{name}", "Domain deleted successfully")

    @mcp.tool(name="digitalocean-domain-record-get", annotations=read_only("Get Domain Record"))
    async def digitalocean_domain_record_get(
        domain: str = Field(..., description="Domain name"),
        record_id: int = Field(..., description="ID of the domain record"),
    ) -> str:
        """Get a domain record by domain name and record ID."""
        if not domain:
            raise ToolError("Domain name is required")
        if not record_id:
            raise ToolError("RecordID is required")
        return await fetch(f"/domains/{domain}/records/{record_id}", "domain_record")

    @mcp.tool(name="digitalocean-domain-record-list", annotations=read_only("List Domain Records"))
    async def digitalocean_domain_record_list(
        domain: str = Field(..., description="Domain name"),
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List the DNS records of a domain with pagination."""
        if not domain:
            raise ToolError("Domain name is required")
        return await fetch(f"/domains/{domain}/records", "domain_records", page_options(page, per_page, 20))

    @mcp.tool(name="digitalocean-domain-record-create", annotations=tool_annotations("Create Domain Record"))
    async def digitalocean_domain_record_create(
        domain: str = Field(..., description="Domain name"),
        record_type: str = Field(..., description="Record type (e.g., A, CNAME, TXT)"),
        name: str = Field(..., description="Record name"),
        data: str = Field(..., description="Record data"),
    ) -> str:
        """Create a DNS record on a domain."""
        body = {"type": record_type, "name": name, "data": data}
        return to_json(await send("POST", f"/domains/{domain}/records", body, "domain_record"))

    @mcp.tool(name="digitalocean-domain-record-edit",
              annotations=tool_annotations("Edit Domain Record", idempotent=True))
    async def digitalocean_domain_record_edit(
        domain: str = Field(..., description="Domain name"),
        record_id: int = Field(..., description="ID of the record to edit"),
        record_type: str = Field(..., description="Record type (e.g., A, CNAME, TXT)"),
        name: str = Field(..., description="Record name"),
        data: str = Field(..., description="Record data"),
    ) -> str:
        """Replace the type, name and data of an existing DNS record."""
        body = {"type": record_type, "name": name, "data": data}
        return to_json(await send("PUT", f"/domains/{domain}/records/{record_id}", body, "domain_record"))

    @mcp.tool(name="digitalocean-domain-record-delete", annotations=destructive("Delete Domain Record"))
    async def digitalocean_domain_record_delete(
        domain: str = Field(..., description="Domain name"),
        record_id: int = Field(..., description="ID of the record to delete"),
    ) -> str:
        """Delete a DNS record."""
        return await remove(f"/domains/{domain}/records/{record_id}", "Record deleted successfully")

    # =========================================================================
    # FIREWALLS
    # =========================================================================

    @mcp.tool(name="digitalocean-firewall-get", annotations=read_only("Get Firewall"))
    async def digitalocean_firewall_get(
        firewall_id: str = Field(..., description="ID of the firewall"),
    ) -> str:
        """Get firewall information by ID."""
        if not firewall_id:
            raise ToolError("Firewall ID is required")
        return await fetch(f"/firewalls/{firewall_id}", "firewall")

    @mcp.tool(name="digitalocean-firewall-list", annotations=read_only("List Firewalls"))
    async def digitalocean_firewall_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List cloud firewalls with pagination."""
        return await fetch("/firewalls", "firewalls", page_options(page, per_page, 20))

    @mcp.tool(name="digitalocean-firewall-create", annotations=tool_annotations("Create Firewall"))
    async def digitalocean_firewall_create(
        name: str = Field(..., description="Name of the firewall"),
        inbound_protocol: str = Field(..., description="Protocol for inbound rule"),
        inbound_port_range: str = Field(..., description="Port range for inbound rule"),
        inbound_source: str = Field(..., description="Source address for inbound rule"),
        outbound_protocol: str = Field(..., description="Protocol for outbound rule"),
        outbound_port_range: str = Field(..., description="Port range for outbound rule"),
        outbound_destination: str = Field(..., description="Destination address for outbound rule"),
        droplet_ids: Optional[List[int]] = Field(default=None, description="Droplet IDs to apply the firewall to"),
        tags: Optional[List[str]] = Field(default=None, description="Tags to apply the firewall to"),
    ) -> str:
        """Create a cloud firewall with one inbound and one outbound rule."""
        inbound = InboundRule(protocol=inbound_protocol, port_range=inbound_port_range,
                              sources=[inbound_source])
        outbound = OutboundRule(protocol=outbound_protocol, port_range=outbound_port_range,
                                destinations=[outbound_destination])
        body = {
            "name": name,
            "inbound_rules": [inbound.to_api()],
            "outbound_rules": [outbound.to_api()],
            "droplet_ids": droplet_ids or [],
            "tags": tags or [],
        }
        return to_json(await send("POST", "/firewalls", body, "firewall"))

    @mcp.tool(name="digitalocean-firewall-delete", annotations=destructive("Delete Firewall"))
    async def digitalocean_firewall_delete(
        firewall_id: str = Field(..., description="ID of the firewall to delete"),
    ) -> str:
        """Delete a cloud firewall."""
        return await remove(f"/firewalls/{firewall_id}", "Firewall deleted successfully")

    @mcp.tool(name="digitalocean-firewall-add-droplets",
              annotations=tool_annotations("Add Droplets to Firewall", idempotent=True))
    async def digitalocean_firewall_add_droplets(
        firewall_id: str = Field(..., description="ID of the firewall to apply to droplets"),
        droplet_ids: List[int] = Field(..., description="Droplet IDs to apply the firewall to"),
    ) -> str:
        """Add one or more droplets to a firewall."""
        await send("POST", f"/firewalls/{firewall_id}/droplets", {"droplet_ids": droplet_ids})
        return "Droplet(s) added to firewall successfully"

    @mcp.tool(name="digitalocean-firewall-remove-droplets",
              annotations=tool_annotations("Remove Droplets from Firewall", destructive=True, idempotent=True))
    async def digitalocean_firewall_remove_droplets(
        firewall_id: str = Field(..., description="ID of the firewall to remove droplets from"),
        droplet_ids: List[int] = Field(..., description="Droplet IDs to remove from the firewall"),
    ) -> str:
        """Remove one or more droplets from a firewall."""
        return await remove(f"/firewalls/{firewall_id}/droplets",
                            "Droplet(s) removed from firewall successfully",
                            {"droplet_ids": droplet_ids})

    @mcp.tool(name="digitalocean-firewall-add-tags",
              annotations=tool_annotations("Add Tags to Firewall", idempotent=True))
    async def digitalocean_firewall_add_tags(
        firewall_id: str = Field(..., description="ID of the firewall to update tags"),
        tags: List[str] = Field(..., description="Tags to apply the firewall to"),
    ) -> str:
        """Add one or more tags to a firewall."""
        await send("POST", f"/firewalls/{firewall_id}/tags", {"tags": tags})
        return "Tag(s) added to firewall successfully"

    @mcp.tool(name="digitalocean-firewall-remove-tags",
              annotations=tool_annotations("Remove Tags from Firewall", destructive=True, idempotent=True))
    async def digitalocean_firewall_remove_tags(
        firewall_id: str = Field(..., description="ID of the firewall to update tags"),
        tags: List[str] = Field(..., description="Tags to remove from the firewall"),
    ) -> str:
        """Remove one or more tags from a firewall."""
        return await remove(f"/firewalls/{firewall_id}/tags",
                            "Tag(s) removed from firewall successfully", {"tags": tags})

    @mcp.tool(name="digitalocean-firewall-add-rules",
              annotations=tool_annotations("Add Firewall Rules", idempotent=True))
    async def digitalocean_firewall_add_rules(
        firewall_id: str = Field(..., description="ID of the firewall to add rules to"),
        inbound_rules: Optional[List[InboundRule]] = Field(default=None, description="Inbound rules to add"),
        outbound_rules: Optional[List[OutboundRule]] = Field(default=None, description="Outbound rules to add"),
    ) -> str:
        """Add one or more inbound or outbound rules to a firewall."""
        body = rules_body(inbound_rules, outbound_rules)
        await send("POST", f"/firewalls/{firewall_id}/rules", body)
        return "Rule(s) added to firewall successfully"

    @mcp.tool(name="digitalocean-firewall-remove-rules",
              annotations=tool_annotations("Remove Firewall Rules", destructive=True, idempotent=True))
    async def digitalocean_firewall_remove_rules(
        firewall_id: str = Field(..., description="ID of the firewall to remove rules from"),
        inbound_rules: Optional[List[InboundRule]] = Field(default=None, description="Inbound rules to remove"),
        outbound_rules: Optional[List[OutboundRule]] = Field(default=None, description="Outbound rules to remove"),
    ) -> str:
        """Remove one or more inbound or outbound rules from a firewall."""
        body = rules_body(inbound_rules, outbound_rules)
        return await remove(f"/firewalls/{firewall_id}/rules",
                            "Rule(s) removed from firewall successfully", body)

    # =========================================================================
    # RESERVED IPS
    # =========================================================================

    @mcp.tool(name="digitalocean-reserved-ipv4-get", annotations=read_only("Get Reserved IPv4"))
    async def digitalocean_reserved_ipv4_get(
        ip: str = Field(..., description="The reserved IPv4 address"),
    ) -> str:
        """Get reserved IPv4 information by IP."""
        if not ip:
            raise ToolError("IPv4 address is required")
        return await fetch(f"/reserved_ips/{ip}", "reserved_ip")

    @mcp.tool(name="digitalocean-reserved-ipv4-list", annotations=read_only("List Reserved IPv4s"))
    async def digitalocean_reserved_ipv4_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List reserved IPv4 addresses with pagination."""
        return await fetch("/reserved_ips", "reserved_ips", page_options(page, per_page, 20))

    @mcp.tool(name="digitalocean-reserved-ipv6-get", annotations=read_only("Get Reserved IPv6"))
    async def digitalocean_reserved_ipv6_get(
        ip: str = Field(..., description="The reserved IPv6 address"),
    ) -> str:
        """Get reserved IPv6 information by IP."""
        if not ip:
            raise ToolError("IPv6 address is required")
        return await fetch(f"/reserved_ipv6/{ip}", "reserved_ipv6")

    @mcp.tool(name="digitalocean-reserved-ipv6-list", annotations=read_only("List Reserved IPv6s"))
    async def digitalocean_reserved_ipv6_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List reserved IPv6 addresses with pagination."""
        return await fetch("/reserved_ipv6", "reserved_ipv6s", page_options(page, per_page, 20))

    @mcp.tool(name="digitalocean-reserved-ip-reserve", annotations=tool_annotations("Reserve IP"))
    async def digitalocean_reserved_ip_reserve(
        region: str = Field(..., description="Region to reserve the IP in"),
        ip_type: str = Field(..., description="Type of IP to reserve ('ipv4' or 'ipv6')"),
    ) -> str:
        """Reserve a new IPv4 or IPv6 address in a region."""
        endpoint, key, region_field = reserved_ip_type(ip_type)
        return to_json(await send("POST", endpoint, {region_field: region}, key))

    @mcp.tool(name="digitalocean-reserved-ip-release", annotations=destructive("Release Reserved IP"))
    async def digitalocean_reserved_ip_release(
        ip: str = Field(..., description="The reserved IP to release"),
        ip_type: str = Field(..., description="Type of IP to release ('ipv4' or 'ipv6')"),
    ) -> str:
        """Release a reserved IPv4 or IPv6 address."""
        endpoint, _, _ = reserved_ip_type(ip_type)
        return await remove(f"{endpoint}/{ip}", "reserved IP released successfully")

    @mcp.tool(name="digitalocean-reserved-ip-assign", annotations=tool_annotations("Assign Reserved IP"))
    async def digitalocean_reserved_ip_assign(
        ip: str = Field(..., description="The reserved IP to assign"),
        droplet_id: int = Field(..., description="The ID of the droplet to assign the IP to"),
        ip_type: str = Field(..., description="Type of IP to assign ('ipv4' or 'ipv6')"),
    ) -> str:
        """Assign a reserved IP to a droplet."""
        endpoint, _, _ = reserved_ip_type(ip_type)
        body = {"type": "assign", "droplet_id": droplet_id}
        return to_json(await send("POST", f"{endpoint}/{ip}/actions", body, "action"))

    @mcp.tool(name="digitalocean-reserved-ip-unassign", annotations=tool_annotations("Unassign Reserved IP"))
    async def digitalocean_reserved_ip_unassign(
        ip: str = Field(..., description="The reserved IP to unassign"),
        ip_type: str = Field(..., description="Type of IP to unassign ('ipv4' or 'ipv6')"),
    ) -> str:
        """Unassign a reserved IP from its droplet."""
        endpoint, _, _ = reserved_ip_type(ip_type)
        return to_json(await send("POST", f"{endpoint}/{ip}/actions", {"type": "unassign"}, "action"))

    # =========================================================================
    # VPCS
    # =========================================================================

    @mcp.tool(name="digitalocean-vpc-get", annotations=read_only("Get VPC"))
    async def digitalocean_vpc_get(
        vpc_id: str = Field(..., description="ID of the VPC"),
    ) -> str:
        """Get VPC information by ID."""
        if not vpc_id:
            raise ToolError("VPC ID is required")
        return await fetch(f"/vpcs/{vpc_id}", "vpc")

    @mcp.tool(name="digitalocean-vpc-list", annotations=read_only("List VPCs"))
    async def digitalocean_vpc_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List VPCs with pagination."""
        return await fetch("/vpcs", "vpcs", page_options(page, per_page, 20))

    @mcp.tool(name="digitalocean-vpc-create", annotations=tool_annotations("Create VPC"))
    async def digitalocean_vpc_create(
        name: str = Field(..., description="Name of the VPC"),
        region: str = Field(..., description="Region slug (e.g., nyc3)"),
    ) -> str:
        """Create a new VPC in a region."""
        return to_json(await send("POST", "/vpcs", {"name": name, "region": region}, "vpc"))

    @mcp.tool(name="digitalocean-vpc-list-members", annotations=read_only("List VPC Members"))
    async def digitalocean_vpc_list_members(
        vpc_id: str = Field(..., description="ID of the VPC"),
    ) -> str:
        """List the resources that are members of a VPC."""
        return await fetch(f"/vpcs/{vpc_id}/members", "members")

    @mcp.tool(name="digitalocean-vpc-delete", annotations=destructive("Delete VPC"))
    async def digitalocean_vpc_delete(
        vpc_id: str = Field(..., description="ID of the VPC to delete"),
    ) -> str:
        """Delete a VPC. The VPC must have no members."""
        return await remove(f"/vpcs/{vpc_id}", "VPC deleted successfully")

    @mcp.tool(name="digitalocean-vpc-peering-create", annotations=tool_annotations("Create VPC Peering"))
    async def digitalocean_vpc_peering_create(
        name: str = Field(..., description="Name for the peering connection"),
        vpc1: str = Field(..., description="ID of the first VPC"),
        vpc2: str = Field(..., description="ID of the second VPC"),
    ) -> str:
        """Create a peering connection between two VPCs."""
        body = {"name": name, "vpc_ids": [vpc1, vpc2]}
        return to_json(await send("POST", "/vpc_peerings", body, "vpc_peering"))

    @mcp.tool(name="digitalocean-vpc-peering-delete", annotations=destructive("Delete VPC Peering"))
    async def digitalocean_vpc_peering_delete(
        peering_id: str = Field(..., description="ID of the VPC peering connection to delete"),
    ) -> str:
        """Delete a VPC peering connection."""
        return await remove(f"/vpc_peerings/{peering_id}", "VPC peering connection deleted")

    # =========================================================================
    # PARTNER ATTACHMENTS
    # =========================================================================

    @mcp.tool(name="digitalocean-partner-attachment-get", annotations=read_only("Get Partner Attachment"))
    async def digitalocean_partner_attachment_get(
        attachment_id: str = Field(..., description="ID of the partner attachment"),
    ) -> str:
        """Get partner attachment information by ID."""
        if not attachment_id:
            raise ToolError("Partner attachment ID is required")
        return await fetch(f"{PARTNER_ATTACHMENTS}/{attachment_id}", "partner_attachment")

    @mcp.tool(name="digitalocean-partner-attachment-list", annotations=read_only("List Partner Attachments"))
    async def digitalocean_partner_attachment_list(
        page: int = Field(default=1, description="Page number"),
        per_page: int = Field(default=20, description="Items per page"),
    ) -> str:
        """List partner attachments with pagination."""
        return await fetch(PARTNER_ATTACHMENTS, "partner_attachments", page_options(page, per_page, 20))

    @mcp.tool(name="digitalocean-partner-attachment-create",
              annotations=tool_annotations("Create Partner Attachment"))
    async def digitalocean_partner_attachment_create(
        name: str = Field(..., description="Name of the partner attachment"),
        region: str = Field(..., description="Region for the partner attachment"),
        bandwidth: int = Field(..., description="Bandwidth in Mbps"),
    ) -> str:
        """Create a partner network attachment."""
        body = {"name": name, "region": region, "connection_bandwidth_in_mbps": bandwidth}
        return to_json(await send("POST", PARTNER_ATTACHMENTS, body, "partner_attachment"))

    @mcp.tool(name="digitalocean-partner-attachment-delete",
              annotations=destructive("Delete Partner Attachment"))
    async def digitalocean_partner_attachment_delete(
        attachment_id: str = Field(..., description="ID of the partner attachment to delete"),
    ) -> str:
        """Delete a partner attachment."""
        return await remove(f"{PARTNER_ATTACHMENTS}/{attachment_id}", "Partner attachment deleted successfully")

    @mcp.tool(name="digitalocean-partner-attachment-get-service-key",
              annotations=read_only("Get Partner Attachment Service Key"))
    async def digitalocean_partner_attachment_get_service_key(
        attachment_id: str = Field(..., description="ID of the partner attachment"),
    ) -> str:
        """Get the service key of a partner attachment."""
        return await fetch(f"{PARTNER_ATTACHMENTS}/{attachment_id}/service_key", "service_key")

    @mcp.tool(name="digitalocean-partner-attachment-get-bgp-config",
              annotations=read_only("Get Partner Attachment BGP Config"))
    async def digitalocean_partner_attachment_get_bgp_config(
        attachment_id: str = Field(..., description="ID of the partner attachment"),
    ) -> str:
        """Get the BGP authentication key of a partner attachment."""
        return await fetch(f"{PARTNER_ATTACHMENTS}/{attachment_id}/bgp_auth_key", "bgp_auth_key")

    @mcp.tool(name="digitalocean-partner-attachment-update",
              annotations=tool_annotations("Update Partner Attachment", idempotent=True))
    async def digitalocean_partner_attachment_update(
        attachment_id: str = Field(..., description="ID of the partner attachment to update"),
        name: str = Field(..., description="New name for the partner attachment"),
        vpc_ids: List[str] = Field(..., description="VPC IDs to associate with the partner attachment"),
    ) -> str:
        """Rename a partner attachment and replace its VPC associations."""
        body = {"name": name, "vpc_ids": vpc_ids}
        return to_json(await send("PATCH", f"{PARTNER_ATTACHMENTS}/{attachment_id}", body, "partner_attachment"))


def register_networking_resources(mcp, client: DigitalOceanClient):

    async def read(what: str, endpoint: str, key: str) -> str:
        try:
            data = await client.get(endpoint)
        except API_ERRORS as e:
            raise resource_error(what, e) from e
        return to_json((data or {}).get(key))

    def string_id(what: str, uri: str) -> str:
        try:
            return extract_string_id_from_uri(uri)
        except InvalidURIError as e:
            raise resource_error(what, e) from e

    @mcp.resource("certificates://{certificate_id}", name="certificate", mime_type="application/json",
                  description="Returns certificate information")
    async def certificate_resource(certificate_id: str) -> str:
        cert = string_id("certificate", f"certificates://{certificate_id}")
        return await read("certificate", f"/certificates/{cert}", "certificate")

    @mcp.resource("domains://{name}", name="domain", mime_type="application/json",
                  description="Returns domain information")
    async def domain_resource(name: str) -> str:
        domain = string_id("domain", f"domains://{name}")
        return await read("domain", f"/domains/{domain}", "domain")

    @mcp.resource("domains://{name}/records/{record_id}", name="domain-record",
                  mime_type="application/json", description="Returns information about a domain record")
    async def domain_record_resource(name: str, record_id: str) -> str:
        try:
            domain, record = extract_domain_and_record_from_uri(f"domains://{name}/records/{record_id}")
        except InvalidURIError as e:
            raise resource_error("domain record", e) from e
        return await read("domain record", f"/domains/{domain}/records/{record}", "domain_record")

    @mcp.resource("firewalls://{firewall_id}", name="firewall", mime_type="application/json",
                  description="Returns firewall information")
    async def firewall_resource(firewall_id: str) -> str:
        firewall = string_id("firewall", f"firewalls://{firewall_id}")
        return await read("firewall", f"/firewalls/{firewall}", "firewall")

    @mcp.resource("reserved-ipv4://{ip}", name="reserved-ipv4", mime_type="application/json",
                  description="Returns information about a reserved IPv4")
    async def reserved_ipv4_resource(ip: str) -> str:
        try:
            address = extract_ip_from_uri(f"reserved-ipv4://{ip}")
        except InvalidURIError as e:
            raise resource_error("reserved IPv4", e) from e
        return await read("reserved IPv4", f"/reserved_ips/{address}", "reserved_ip")

    @mcp.resource("reserved-ipv6://{ip}", name="reserved-ipv6", mime_type="application/json",
                  description="Returns information about a reserved IPv6")
    async def reserved_ipv6_resource(ip: str) -> str:
        try:
            address = extract_ip_from_uri(f"reserved-ipv6://{ip}")
        except InvalidURIError as e:
            raise resource_error("reserved IPv6", e) from e
        return await read("reserved IPv6", f"/reserved_ipv6/{address}", "reserved_ipv6")

    @mcp.resource("vpcs://{vpc_id}", name="vpc", mime_type="application/json",
                  description="Returns VPC information")
    async def vpc_resource(vpc_id: str) -> str:
        vpc = string_id("VPC", f"vpcs://{vpc_id}")
        return await read("VPC", f"/vpcs/{vpc}", "vpc")

    @mcp.resource("vpc-peering://{peering_id}", name="vpc-peering", mime_type="application/json",
                  description="Returns VPC peering information")
    async def vpc_peering_resource(peering_id: str) -> str:
        peering = string_id("VPC peering", f"vpc-peering://{peering_id}")
        return await read("VPC peering", f"/vpc_peerings/{peering}", "vpc_peering")

    @mcp.resource("partner-attachment://{attachment_id}", name="partner-attachment",
                  mime_type="application/json", description="Returns partner attachment information")
    async def partner_attachment_resource(attachment_id: str) -> str:
        attachment = string_id("partner attachment", f"partner-attachment://{attachment_id}")
        return await read("partner attachment", f"{PARTNER_ATTACHMENTS}/{attachment}", "partner_attachment")
