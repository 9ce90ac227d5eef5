from pydantic import BaseModel, ConfigDict
from typing import Any, List, Optional, Union

# ============== QUERY MODELS ==============

class SubcollectionConfig(BaseModel):
    collection: str
    doc: Optional[str] = None

class QueryConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    collection: str
    doc: Optional[str] = None
    subcollections: List[SubcollectionConfig] = []
    # A single [field, op, value] triple or a list of them
    where: Optional[List[Any]] = None
    # "field", ["field", "desc"] or a list of either
    order_by: Optional[Union[str, List[Any]]] = None
    limit: Optional[int] = None
    start_at: Optional[Any] = None
    start_after: Optional[Any] = None
    end_at: Optional[Any] = None
    end_before: Optional[Any] = None
    store_as: Optional[str] = None

# ============== RESPONSE MODELS ==============

class ListenerListResponse(BaseModel):
    listeners: List[str]
    count: int

class ListenerMessageResponse(BaseModel):
    message: str
