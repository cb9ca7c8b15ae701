"""School roster backend.

Students, teachers and the many-to-many links between them, served over
a small FastAPI application (`school_api.main`) on top of SQLModel.
"""
