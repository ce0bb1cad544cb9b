# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# Sans cet import, les FK comme class_subjects.teacher_id → users.id échouent
# avec NoReferencedTableError si user.py n'est pas chargé avant school_class.py.

from app.models.user import User  # noqa: F401  (doit précéder les profils)
from app.models.academic import AcademicLevel, Department, Subject, SubjectAcademicLevel  # noqa: F401
from app.models.school_class import ClassSubject, SchoolClass, StudentParent  # noqa: F401
from app.models.profile import Parent, Student, Teacher  # noqa: F401
