"""Shared sample rows shaped like a Workday "View My Courses" export."""


def well_formed_row():
    return {
        "Course Listing": "CPSC 110 - Computation, Programs, and Programming",
        "Section": "CPSC 110-101",
        "Instructional Format": "Lecture",
        "Delivery Mode": "In Person",
        "Meeting Patterns": "Mon Wed Fri | 10:00 a.m. - 11:00 a.m. | 2024-09-03 - 2024-12-05 | DMP 110",
        "Instructor": "Gregor Kiczales",
    }


def explicit_columns_row():
    return {
        "Course Listing": "MATH 100 - Differential Calculus",
        "Section": "MATH 100-102",
        "Instructional Format": "Lecture",
        "Delivery Mode": "In Person",
        "Meeting Patterns": "See department",
        "Instructor": "",
        "Days": "Tue Thu",
        "Start Time": "2:00 PM",
        "End Time": "3:30 PM",
        "Start Date": "2024-09-03",
        "End Date": "2024-12-05",
    }
