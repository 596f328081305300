from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base


class Member(Base):
    __tablename__ = "member"

    member_no = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(String(50), unique=True, index=True, nullable=False)
    member_pwd = Column(String(100), nullable=False)  # bcrypt hash
    member_name = Column(String(50), nullable=False)
    member_email = Column(String(255), unique=True, index=True, nullable=False)  # stored trimmed + lower-cased
    member_role = Column(String(20), nullable=False, default="ROLE_USER")
    member_created_at = Column(DateTime(timezone=True), nullable=False, default=func.now(), server_default=func.now())
    member_updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
    member_last_login = Column(DateTime(timezone=True), nullable=True)
    member_is_active = Column(Boolean, nullable=False, default=True, server_default='1')
    member_deleted_at = Column(DateTime(timezone=True), nullable=True)

    auths = relationship("MemberAuth", back_populates="member", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "memberNo": self.member_no,
            "memberId": self.member_id,
            "memberName": self.member_name,
            "memberEmail": self.member_email,
            "memberRole": self.member_role,
        }


class MemberAuth(Base):
    __tablename__ = "member_auth"

    no = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(String(50), ForeignKey("member.member_id"), index=True, nullable=False)
    auth = Column(String(20), nullable=False)

    member = relationship("Member", back_populates="auths")
