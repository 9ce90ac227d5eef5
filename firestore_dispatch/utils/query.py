"""
Query config parsing, listener naming and Firestore reference building
"""
from typing import Any, Dict, List, Union

from google.cloud.firestore_v1.base_query import FieldFilter

from firestore_dispatch.schemas import QueryConfig, SubcollectionConfig

QueryInput = Union[str, Dict[str, Any], QueryConfig]

DIRECTIONS = {"asc": "ASCENDING", "desc": "DESCENDING"}


def _path_to_config(path: str) -> QueryConfig:
    """Split "users/abc/posts" into collection, doc and subcollections"""
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        raise ValueError("Query path must contain at least a collection name")
    collection, doc, rest = segments[0], None, segments[1:]
    if rest:
        doc, rest = rest[0], rest[1:]
    subcollections = [
        SubcollectionConfig(
            collection=rest[i],
            doc=rest[i + 1] if i + 1 < len(rest) else None
        )
        for i in range(0, len(rest), 2)
    ]
    return QueryConfig(collection=collection, doc=doc, subcollections=subcollections)


def get_query_config(query: QueryInput) -> QueryConfig:
    """Normalize a path string, dict or QueryConfig into a QueryConfig"""
    if isinstance(query, QueryConfig):
        return query
    if isinstance(query, str):
        return _path_to_config(query)
    if isinstance(query, dict):
        if not query.get("collection"):
            raise ValueError("Query config must include a collection")
        return QueryConfig(**query)
    raise ValueError(f"Invalid query: {query!r}. Must be a path string or config dict")


def _where_clauses(where: Any) -> List[List[Any]]:
    if not where:
        return []
    # A single triple such as ["age", ">", 5]
    if isinstance(where[0], str):
        return [list(where)]
    return [list(clause) for clause in where]


def _order_by_clauses(order_by: Any) -> List[List[Any]]:
    if not order_by:
        return []
    if isinstance(order_by, str):
        return [[order_by]]
    if isinstance(order_by[0], str):
        return [list(order_by)]
    return [[clause] if isinstance(clause, str) else list(clause) for clause in order_by]


def _stringify(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def get_query_path(meta: QueryConfig) -> str:
    path = meta.collection
    if meta.doc:
        path += f"/{meta.doc}"
    for sub in meta.subcollections:
        path += f"/{sub.collection}"
        if sub.doc:
            path += f"/{sub.doc}"
    return path


def get_query_name(query: QueryInput) -> str:
    """
    Name used as the listener registry key.

    Path plus query params, e.g. "users?where=age:>:5&limit=10". store_as
    replaces the generated name.
    """
    meta = get_query_config(query)
    if meta.store_as:
        return meta.store_as

    params = []
    for clause in _where_clauses(meta.where):
        params.append("where=" + ":".join(_stringify(part) for part in clause))
    for clause in _order_by_clauses(meta.order_by):
        params.append("orderBy=" + ":".join(str(part) for part in clause))
    for key in ("limit", "start_at", "start_after", "end_at", "end_before"):
        value = getattr(meta, key)
        if value is not None:
            params.append(f"{key}={_stringify(value)}")

    path = get_query_path(meta)
    return f"{path}?{'&'.join(params)}" if params else path


def firestore_ref(handle: Any, query: QueryInput):
    """Build the document, collection or query reference for a config"""
    meta = get_query_config(query)
    ref = handle.firestore().collection(meta.collection)
    if meta.doc:
        ref = ref.document(meta.doc)
    for sub in meta.subcollections:
        ref = ref.collection(sub.collection)
        if sub.doc:
            ref = ref.document(sub.doc)

    for field, op, value in _where_clauses(meta.where):
        ref = ref.where(filter=FieldFilter(field, op, value))
    for clause in _order_by_clauses(meta.order_by):
        direction = "ASCENDING"
        if len(clause) > 1:
            direction = DIRECTIONS.get(str(clause[1]).lower(), str(clause[1]).upper())
        ref = ref.order_by(clause[0], direction=direction)
    if meta.limit is not None:
        ref = ref.limit(meta.limit)
    for key in ("start_at", "start_after", "end_at", "end_before"):
        value = getattr(meta, key)
        if value is not None:
            # Cursor values line up with the order_by fields
            cursor = value if isinstance(value, (dict, list, tuple)) else [value]
            ref = getattr(ref, key)(cursor)
    return ref


def snapshot_to_payload(snapshot: Any) -> Dict[str, Any]:
    """
    Convert a document snapshot or a list of them into state payload.

    Returns {"data": {id: dict or None}, "ordered": [{"id": id, **dict}]}
    """
    snapshots = snapshot if isinstance(snapshot, (list, tuple)) else [snapshot]
    data = {}
    ordered = []
    for doc in snapshots:
        doc_data = doc.to_dict() if doc.exists else None
        data[doc.id] = doc_data
        if doc_data is not None:
            ordered.append({"id": doc.id, **doc_data})
    return {"data": data, "ordered": ordered}
