from sqlalchemy import func
from sqlalchemy.orm import Session

from models.party import Item, Party


def list_parties(db: Session, search: str | None = None, limit: int = 500) -> list[Party]:
    q = db.query(Party)
    if search:
        q = q.filter(Party.name.ilike(f"%{search}%"))
    return q.order_by(Party.name.asc()).limit(limit).all()


def get_party(db: Session, party_id: int) -> Party | None:
    return db.query(Party).filter(Party.id == party_id).first()


def create_party(db: Session, values: dict) -> Party:
    row = Party(**values)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_party(db: Session, row: Party, values: dict) -> Party:
    for key, value in values.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def delete_party(db: Session, row: Party) -> None:
    db.delete(row)
    db.commit()


# --------------------------------------------------
# Item catalog
# --------------------------------------------------

def list_items(db: Session, search: str | None = None, limit: int = 500) -> list[Item]:
    q = db.query(Item)
    if search:
        q = q.filter(Item.name.ilike(f"%{search}%"))
    return q.order_by(Item.name.asc()).limit(limit).all()


def get_item(db: Session, item_id: int) -> Item | None:
    return db.query(Item).filter(Item.id == item_id).first()


def get_items_by_ids(db: Session, ids: list[int]) -> dict[int, Item]:
    if not ids:
        return {}
    return {row.id: row for row in db.query(Item).filter(Item.id.in_(ids)).all()}


def find_item_by_name(db: Session, name: str) -> Item | None:
    """Case-insensitive exact match."""
    return db.query(Item).filter(func.lower(Item.name) == name.strip().lower()).first()


def create_item(db: Session, values: dict) -> Item:
    row = Item(**values)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_item(db: Session, row: Item, values: dict) -> Item:
    for key, value in values.items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def delete_item(db: Session, row: Item) -> None:
    db.delete(row)
    db.commit()
