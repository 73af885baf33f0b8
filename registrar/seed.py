"""
Script to add sample data to a running registrar via its REST API.

Usage:
    registrar-seed [--base-url http://127.0.0.1:8000]

The base URL can also come from the REGISTRAR_BASE_URL environment variable.
"""

import os
import sys
from typing import Any, Dict, List, Optional

import requests

from .logging import get_logger

logger = get_logger("seed")

DEFAULT_BASE_URL = "http://127.0.0.1:8000"

SAMPLE_STUDENTS = ["Alice", "Bob", "Carol", "David", "Emma", "Frank"]

# (catalog number, title, enrollment limit)
SAMPLE_COURSES = [
    ("COMP 225", "Software Fun Fun", 2),
    ("Math 6", "All About the Number Six", None),
    ("UBW 101", "Underwater Basket Weaving 101", 4),
]


class SeedClient:
    """Thin wrapper over an HTTP session pointed at a registrar server.

    Any object with requests-style ``get``/``post`` methods works as the
    session, including ``fastapi.testclient.TestClient``.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def check_server(self) -> bool:
        """Check if the server is running."""
        try:
            response = self.session.get(self._url("/health"), timeout=2)
        except requests.exceptions.RequestException as e:
            logger.error("Server at %s is not reachable: %s", self.base_url, e)
            return False
        return response.status_code == 200

    def create_student(self, name: str) -> Optional[Dict[str, Any]]:
        """Create a new student."""
        response = self.session.post(self._url("/students"), json={"name": name})
        if response.status_code == 201:
            logger.info("Created student: %s", name)
            return response.json()
        logger.error("Failed to create student %s: %s", name, response.text)
        return None

    def create_course(self, catalog_number: str, title: str,
                      enrollment_limit: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """Create a new course."""
        data = {"catalog_number": catalog_number, "title": title}
        if enrollment_limit is not None:
            data["enrollment_limit"] = enrollment_limit
        response = self.session.post(self._url("/courses"), json=data)
        if response.status_code == 201:
            logger.info("Created course: %s - %s", catalog_number, title)
            return response.json()
        logger.error("Failed to create course %s: %s", catalog_number, response.text)
        return None

    def enroll_student(self, student_id: str, course_id: str) -> Optional[Dict[str, Any]]:
        """Enroll a student in a course."""
        data = {"student_id": student_id, "course_id": course_id}
        response = self.session.post(self._url("/enrollments"), json=data)
        if response.status_code != 200:
            logger.error("Failed to enroll student %s: %s", student_id, response.text)
            return None

        result = response.json()
        if result.get('status') == 'waitlisted':
            logger.info("Student %s waitlisted at position %s", student_id, result.get('waitlist_position'))
        else:
            logger.info("Student %s: %s", student_id, result.get('message'))
        return result

    def list_courses(self) -> List[Dict[str, Any]]:
        """List all courses."""
        response = self.session.get(self._url("/courses"))
        if response.status_code != 200:
            logger.error("Failed to list courses: %s", response.text)
            return []
        return response.json()


def seed(client: SeedClient) -> Dict[str, Any]:
    """Create the sample students and courses and enroll everyone in everything.

    Returns the created students, courses and enrollment results.
    """
    students = [client.create_student(name) for name in SAMPLE_STUDENTS]
    courses = [client.create_course(*course) for course in SAMPLE_COURSES]

    enrollments = []
    for course in courses:
        if not course:
            continue
        for student in students:
            if student:
                enrollments.append(client.enroll_student(student['id'], course['id']))

    return {
        'students': students,
        'courses': courses,
        'enrollments': enrollments,
    }


def main():
    """Main execution."""
    import argparse

    from .logging import setup_logging

    parser = argparse.ArgumentParser(description="Add sample data to a registrar server")
    parser.add_argument("--base-url", type=str,
                        default=os.environ.get("REGISTRAR_BASE_URL", DEFAULT_BASE_URL),
                        help="Registrar server base URL")
    args = parser.parse_args()

    setup_logging()
    client = SeedClient(args.base_url)

    if not client.check_server():
        logger.error("Please start the server first: registrar --port 8000")
        sys.exit(1)

    seed(client)

    for course in client.list_courses():
        logger.info("%s: %d enrolled, %d waitlisted",
                    course['catalog_number'], len(course['students']), len(course['waitlist']))


if __name__ == "__main__":
    main()
