from beanie import Document, Indexed


class Doctor(Document):
    name: str
    email: Indexed(str)
    specialty: str | None = None
    img: str | None = None

    class Settings:
        name = "doctors"
