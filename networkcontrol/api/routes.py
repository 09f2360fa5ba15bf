# networkcontrol/api/routes.py
"""
HTTP routes for the operator workflow

Thin JSON wrappers over NetworkControl; all validation happens in the
pipeline and surfaces through the NetworkControlError handler.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from networkcontrol.governance.codec import from_hex
from networkcontrol.service import NetworkControl
from .schemas import (
    AckOut,
    AuthoritiesOut,
    AuthorityOut,
    CreateMessageIn,
    MessageIn,
    SignIn,
    VerdictOut,
)

router = APIRouter()


def get_service(request: Request) -> NetworkControl:
    return request.app.state.service


@router.get("/health")
async def health(service: NetworkControl = Depends(get_service)) -> Dict[str, Any]:
    return {
        "status": "ok",
        "roster_cache": service.roster_cache.get_status(),
    }


@router.get("/authorities", response_model=AuthoritiesOut)
async def authorities(service: NetworkControl = Depends(get_service)):
    roster = await service.authorities()
    return AuthoritiesOut(authorities=[
        AuthorityOut(
            chain_id=a.chain_id,
            signing_key=a.signing_key,
            status=a.status.value,
            action="Demote" if a.is_federated else "Promote",
        )
        for a in roster
    ])


@router.get("/craft/{action}/{chain_id}")
async def craft(action: str, chain_id: str, service: NetworkControl = Depends(get_service)):
    draft = await service.draft(action, chain_id)
    return draft.to_dict()


@router.post("/messages")
async def create_message(body: CreateMessageIn, service: NetworkControl = Depends(get_service)):
    message_hex = service.build_message(body.action, body.chain_id, body.timestamp, body.server_type)
    description = await service.describe(message_hex)
    return description.to_dict()


@router.post("/messages/import")
async def import_message(body: MessageIn, service: NetworkControl = Depends(get_service)):
    description = await service.describe(body.message)
    return description.to_dict()


@router.post("/messages/sign")
async def sign_message(body: SignIn, service: NetworkControl = Depends(get_service)):
    message_hex = service.add_signature(body.message, body.public_key, body.signature)
    description = await service.describe(message_hex)
    return description.to_dict()


@router.post("/messages/evaluate", response_model=VerdictOut)
async def evaluate_message(body: MessageIn, service: NetworkControl = Depends(get_service)):
    verdict = await service.evaluate(body.message)
    label = "Submit to Network"
    if verdict.error_notes:
        label = "Submit to Network despite errors"
    return VerdictOut(
        message=from_hex(body.message, "message").hex(),
        submit_label=label,
        **verdict.to_dict(),
    )


@router.post("/messages/send", response_model=AckOut)
async def send_message(body: MessageIn, service: NetworkControl = Depends(get_service)):
    ack = await service.submit(body.message)
    return AckOut(**ack.to_dict())
