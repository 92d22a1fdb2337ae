"""
Record kinds shared by the tests.
"""

from recordkit.core import NUMBER, STRING, RecordKind, RelationDescriptor

User = RecordKind(
    "User",
    attributes={"id": NUMBER, "name": STRING},
)

Image = RecordKind(
    "Image",
    attributes={"id": NUMBER, "url": STRING},
)

ProfileImage = RecordKind(
    "ProfileImage",
    attributes={"id": NUMBER, "imageId": NUMBER, "userId": NUMBER, "name": STRING},
    relations=(
        RelationDescriptor("User", foreign_key="userId", target="User"),
        RelationDescriptor("Image", target="Image"),
    ),
)
