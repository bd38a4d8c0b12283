"""
Church, branch, user and small-group models for ChurchOS.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, CheckConstraint
from .database_config import Base


ROLES = ("super_admin", "branch_admin", "group_leader", "member")


class Church(Base):
    __tablename__ = "churches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    def __repr__(self):
        return f"<Church {self.name}>"


class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    church_id = Column(Integer, ForeignKey("churches.id"))
    name = Column(String, nullable=False)
    location = Column(String)

    def to_dict(self):
        return {
            "id": self.id,
            "church_id": self.church_id,
            "name": self.name,
            "location": self.location,
        }

    def __repr__(self):
        return f"<Branch {self.name}>"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('super_admin', 'branch_admin', 'group_leader', 'member')",
            name="ck_users_role",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    role = Column(String, nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "branch_id": self.branch_id,
        }

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"))
    name = Column(String, nullable=False)
    type = Column(String)
    description = Column(Text)
    meeting_url = Column(String)

    def to_dict(self):
        return {
            "id": self.id,
            "branch_id": self.branch_id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "meeting_url": self.meeting_url,
        }

    def __repr__(self):
        return f"<Group {self.name}>"


class GroupMember(Base):
    __tablename__ = "group_members"

    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id"), primary_key=True)
    role_in_group = Column(String)

    def __repr__(self):
        return f"<GroupMember user={self.user_id} group={self.group_id}>"
