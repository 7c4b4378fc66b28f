"""
Script to add sample data to the Roster service via REST API.
Make sure the server is running before executing this script.

Usage:
    python add_data.py
"""

import os
import sys

import requests


OK = "[OK]"
FAIL = "[FAIL]"

# ROSTER_BASE_URL wins; otherwise the local server on PORT (3000 by default)
BASE_URL = os.environ.get("ROSTER_BASE_URL") or f"http://127.0.0.1:{os.environ.get('PORT', '3000')}"

def check_server():
    """Check if the server is running."""
    try:
        response = requests.get(f"{BASE_URL}/health", timeout=2)
        if response.status_code == 200:
            db_state = "connected" if response.json().get("db") else "unavailable"
            print(f"{OK} Server is running (database {db_state})")
            return True
    except requests.exceptions.RequestException:
        pass
    print(f"{FAIL} Server is not running!")
    print("\nPlease start the server first:")
    print("  roster --port 3000")
    return False

def _post(path, data, label):
    """POST a record and return the created view, or None on failure."""
    try:
        response = requests.post(f"{BASE_URL}{path}", json=data, timeout=5)
        if response.status_code == 201:
            print(f"{OK} Created {label}")
            return response.json()
        print(f"{FAIL} Failed to create {label}: {response.text}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"{FAIL} Error creating {label}: {e}")
        return None

def create_course(name):
    """Create a new course."""
    return _post("/courses", {"name": name}, f"course: {name}")

def create_student(name, email=None, course=None):
    """Create a new student, optionally attached to a created course."""
    data = {"name": name, "email": email}
    if course:
        data["course_id"] = course["id"]
    return _post("/students", data, f"student: {name}")

def create_grade(student, course, score):
    """Record a grade for a created student in a created course."""
    if not student or not course:
        return None
    data = {"student_id": student["id"], "course_id": course["id"], "score": score}
    return _post("/grades", data, f"grade: {student['name']} / {course['name']} = {score}")

def _list(path):
    try:
        response = requests.get(f"{BASE_URL}{path}", timeout=5)
        if response.status_code == 200:
            return response.json()
        print(f"{FAIL} Failed to list {path}: {response.text}")
    except requests.exceptions.RequestException as e:
        print(f"{FAIL} Error listing {path}: {e}")
    return []

def list_courses():
    """List all courses."""
    courses = _list("/courses")
    print(f"\n{'='*60}")
    print(f"Courses ({len(courses)})")
    print(f"{'='*60}")
    for course in courses:
        print(f"  {course['id'][:8]} | {course['name']}")
    return courses

def list_students():
    """List all students."""
    students = _list("/students")
    print(f"\n{'='*60}")
    print(f"Students ({len(students)})")
    print(f"{'='*60}")
    for student in students:
        print(f"  {student['name']:15} | {student['email'] or '-':30} | {student['course_name'] or '-'}")
    return students

def list_grades():
    """List all grades."""
    grades = _list("/grades")
    print(f"\n{'='*60}")
    print(f"Grades ({len(grades)})")
    print(f"{'='*60}")
    for grade in grades:
        print(f"  {grade['student_name'] or '?':15} | {grade['course_name'] or '?':25} | {grade['score']}")
    return grades

def main():
    """Main execution."""
    print("="*60)
    print("Roster - Data Addition Script")
    print("="*60)
    print()
    
    # Check if server is running
    if not check_server():
        sys.exit(1)
    
    print("\n" + "="*60)
    print("Adding Sample Data...")
    print("="*60 + "\n")
    
    print("Creating courses...")
    algebra = create_course("Algebra")
    programming = create_course("Introduction to Programming")
    writing = create_course("English Composition")
    
    print("\nCreating students...")
    ann = create_student("Ann", "ann@university.edu", algebra)
    bob = create_student("Bob", "bob@university.edu", programming)
    carol = create_student("Carol", "carol@university.edu", writing)
    dave = create_student("Dave")
    
    print("\nRecording grades...")
    create_grade(ann, algebra, 95)
    create_grade(ann, writing, 88.5)
    create_grade(bob, programming, 72)
    create_grade(carol, writing, 91)
    create_grade(dave, algebra, 0)
    
    # Display results
    list_courses()
    list_students()
    list_grades()
    
    print("\n" + "="*60)
    print(f"{OK} Sample data added successfully!")
    print("="*60)
    print("\nYou can now:")
    print(f"  - View API docs: {BASE_URL}/docs")
    print(f"  - List students: curl {BASE_URL}/students")
    print(f"  - List courses: curl {BASE_URL}/courses")
    print(f"  - List grades: curl {BASE_URL}/grades")
    print()

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n\n{FAIL} Interrupted by user")
        sys.exit(1)
