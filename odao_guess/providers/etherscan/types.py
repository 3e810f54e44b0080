from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RawTransaction(BaseModel):
    """One row of an Etherscan ``account/txlist`` response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    hash: str
    from_address: str = Field(alias="from")
    to_address: Optional[str] = Field(default=None, alias="to")
    timestamp: int = Field(alias="timeStamp")
    is_error: str = Field(default="", alias="isError")
    receipt_status: str = Field(default="", alias="txreceipt_status")
    input: str = "0x"
    function_name: Optional[str] = Field(default=None, alias="functionName")
    block_number: Optional[int] = Field(default=None, alias="blockNumber")

    @property
    def failed(self) -> bool:
        return self.is_error != "0"

    @property
    def reverted(self) -> bool:
        return self.receipt_status != "1"


__all__ = ["RawTransaction"]
