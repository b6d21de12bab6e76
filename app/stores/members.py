import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.membership import Member


class MemberStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_user_id(self, user_id: uuid.UUID) -> Member | None:
        return self.db.scalar(select(Member).where(Member.user_id == user_id))

    # flush 시점에 user_id UNIQUE 위반이 드러나도록 즉시 flush
    def create(self, **fields) -> Member:
        member = Member(**fields)
        self.db.add(member)
        self.db.flush()
        return member
