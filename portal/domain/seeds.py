"""Built-in seed collections used on first start and by reset."""

DEFAULT_STUDENTS = [
    {"id": "1234500001", "name": "John Doe", "email": "john@x.edu", "password": "Student@001"},
    {"id": "1234500003", "name": "Priya Sharma", "email": "priya.sharma@x.edu", "password": "Student@003"},
    {"id": "1234500004", "name": "Carlos Mendes", "email": "carlos.mendes@x.edu", "password": "Student@004"},
    {"id": "1234500005", "name": "Aisha Bello", "email": "aisha.bello@x.edu", "password": "Student@005"},
]

DEFAULT_TEACHERS = [
    {
        "id": "9876500001",
        "name": "Dr. Alan Turing",
        "email": "alan.turing@x.edu",
        "password": "Teacher@001",
        "specialization": ["Computer Science", "Mathematics"],
    },
    {
        "id": "9876500002",
        "name": "Dr. Grace Hopper",
        "email": "grace.hopper@x.edu",
        "password": "Teacher@002",
        "specialization": ["Software Engineering"],
    },
    {
        "id": "9876500003",
        "name": "Prof. Marie Curie",
        "email": "marie.curie@x.edu",
        "password": "Teacher@003",
        "specialization": ["Physics", "Chemistry"],
    },
]

SEEDS = {"students": DEFAULT_STUDENTS, "teachers": DEFAULT_TEACHERS}
