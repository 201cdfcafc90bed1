"""Leadership roster used to address packet mail and messages."""

from typing import Dict, List

EMPLOYEES: List[Dict[str, str]] = [
    {"name": "Dr. Elena Zhou", "email": "elena.zhou@xiweipharma.com", "role": "CEO",
     "department": "Executive", "site": "RWC"},
    {"name": "Dr. Rishi Kaul", "email": "rishi.kaul@xiweipharma.com", "role": "CSO",
     "department": "Research", "site": "RWC"},
    {"name": "Marta Gomez", "email": "marta.gomez@xiweipharma.com", "role": "Head of Safety",
     "department": "Safety & Compliance", "site": "RWC"},
    {"name": "Anika Roy", "email": "anika.roy@xiweipharma.com", "role": "Head of Platform",
     "department": "Platform Engineering", "site": "RWC"},
    {"name": "Kyle Johnson", "email": "kyle.johnson@xiweipharma.com",
     "role": "Head of IT & Facilities", "department": "IT", "site": "RWC"},
    {"name": "Sarah Martinez", "email": "sarah.martinez@xiweipharma.com",
     "role": "Biosecurity Officer", "department": "Safety & Compliance", "site": "RWC"},
]

MODEL_ADDRESS = "assistant@xiweipharma.com"


def email_for_role(role: str) -> str:
    """Email of the first employee whose role matches, case-insensitively."""
    for employee in EMPLOYEES:
        if employee["role"].lower() == role.lower():
            return employee["email"]
    return f"{role.lower().replace(' ', '-')}@xiweipharma.com"
