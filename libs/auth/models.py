from pydantic import BaseModel, ConfigDict, Field


class SessionClaims(BaseModel):
    """
    Claims carried by a HarvestHub session token.
    """

    model_config = ConfigDict(populate_by_name=True)

    account_id: str = Field(..., alias="sub")
    session_id: str = Field(..., alias="sid")
    exp: int
