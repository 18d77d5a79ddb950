ROLE_USER = "user"
ROLE_CREATOR = "creator"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_CREATOR, ROLE_ADMIN)

PROFILE_FIELDS = ("name", "photoURL", "bio")


class User:
    def __init__(self, email, name=None, photo_url=None, role=ROLE_USER, bio="", created_at=None):
        self.email = email
        self.name = name
        self.photo_url = photo_url
        self.role = role
        self.bio = bio
        self.created_at = created_at
        self.updated_at = created_at

    def to_dict(self):
        return {
            "id": self.email,
            "email": self.email,
            "name": self.name,
            "photoURL": self.photo_url,
            "role": self.role,
            "bio": self.bio,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at
        }
