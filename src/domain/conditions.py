"""
Condition evaluators - decide which optional steps a path requires.

All predicates are fail-closed: a fact that has not arrived yet counts
as "step required". A slow lookup therefore keeps its verification step
in the list until it reports a confirmed match.
"""

from collections.abc import Mapping

from .addresses import matches
from .ports import AddressMatch, Facts


def needs_enable_dnssec(facts: Facts) -> bool:
    return facts.dnssec_enabled is not True


def needs_verify_offchain_ownership(facts: Facts) -> bool:
    status = facts.offchain_status
    if status is None:
        return True
    return not (
        status.resolver_match is AddressMatch.MATCHING
        and status.address_match is AddressMatch.MATCHING
    )


def needs_verify_onchain_ownership(facts: Facts) -> bool:
    if facts.dns_owner_address is None:
        return True
    return matches(facts.connected_address, facts.dns_owner_address) is not AddressMatch.MATCHING


def is_offchain_eligible(
    parent_resolver: str | None,
    chain_id: int | str,
    offchain_resolvers: Mapping[str, str],
) -> bool:
    """
    Check whether the offchain path may be chosen.

    The parent zone must resolve through the offchain resolver registered
    for the active network. Networks without an allow-list entry never
    offer the offchain path. This only gates the path choice; it does not
    add or remove steps.

    Args:
        parent_resolver: Resolver address of the name's parent zone, if known
        chain_id: Active network identifier
        offchain_resolvers: Network identifier -> offchain resolver address

    Returns:
        True if the offchain path is available
    """
    expected = offchain_resolvers.get(str(chain_id))
    if expected is None:
        return False
    return matches(parent_resolver, expected) is AddressMatch.MATCHING
