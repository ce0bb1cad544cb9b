"""
Rôles utilisateurs reconnus par l'API.
"""

ADMIN = "admin"
HEADMASTER = "headmaster"
HOD = "hod"
TEACHER = "teacher"
PARENT = "parent"
STUDENT = "student"

ALL_ROLES = frozenset({ADMIN, HEADMASTER, HOD, TEACHER, PARENT, STUDENT})

# Rôles qui possèdent une ligne de profil dédiée (teachers, students, parents)
PROFILE_ROLES = frozenset({TEACHER, STUDENT, PARENT})
