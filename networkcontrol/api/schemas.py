# networkcontrol/api/schemas.py
"""Request and response models for the HTTP surface"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CreateMessageIn(BaseModel):
    """Fields of a new authority-change request"""
    model_config = ConfigDict(extra="forbid")

    action: str = Field(..., description="add or remove")
    chain_id: str = Field(..., description="Target identity chain ID, 64 hex chars")
    timestamp: Union[int, str] = Field(..., description="Milliseconds since epoch")
    server_type: str = Field(..., description="federated or audit")


class MessageIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., description="Hex-encoded governance message")


class SignIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., description="Hex-encoded governance message")
    public_key: str = Field(..., description="Ed25519 public key, hex")
    signature: str = Field(..., description="Ed25519 signature over the signable payload, hex")


class AuthorityOut(BaseModel):
    chain_id: str
    signing_key: str
    status: str
    action: str          # Promote or Demote, depending on current status


class AuthoritiesOut(BaseModel):
    authorities: List[AuthorityOut]


class SignerOut(BaseModel):
    public_key: str
    authority_chain_id: Optional[str]
    valid: bool
    counted: bool


class VerdictOut(BaseModel):
    message: str
    info: List[str]
    errors: List[str]
    valid_signer_count: int
    required_count: int
    passed: bool
    signers: List[SignerOut]
    submit_label: str


class AckOut(BaseModel):
    message: str
    response: str
    submitted_at: str
