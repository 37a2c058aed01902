from typing import Optional


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Layout-agnostic graph vertex.

    Attributes:
        id    : Unique identifier within its Graph.
        label : Human-readable name (defaults to the id).
    """

    __slots__ = ("id", "label")

    def __init__(self, node_id: str, label: Optional[str] = None):
        self.id:    str = str(node_id)
        self.label: str = label if label is not None else self.id

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label}

    @classmethod
    def from_dict(cls, data) -> "Node":
        # accept a bare id as shorthand
        if not isinstance(data, dict):
            return cls(node_id=data)
        return cls(node_id=data["id"], label=data.get("label"))

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
