"""
User model for MongoDB storage
"""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """
    Stores user information from Google OAuth.
    google_id is the identity that owns an itinerary (PlanRecord.user_id).
    """

    google_id: str = Field(..., description="Google user ID (unique identifier)")
    email: str = Field(..., description="User email address")
    name: str = Field(..., description="User full name")
    given_name: str | None = Field(None, description="User first name")
    family_name: str | None = Field(None, description="User last name")
    picture: str | None = Field(None, description="URL to user profile picture")
    email_verified: bool = Field(default=False, description="Whether email is verified")

    # Timestamps
    created_at: datetime = Field(
        default_factory=datetime.utcnow, description="Account creation timestamp"
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow, description="Last update timestamp"
    )
    last_login: datetime = Field(
        default_factory=datetime.utcnow, description="Last login timestamp"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "google_id": "109876543210",
                "email": "traveler@example.com",
                "name": "Sam Rivera",
                "given_name": "Sam",
                "family_name": "Rivera",
                "picture": "https://example.com/photo.jpg",
                "email_verified": True,
            }
        }
