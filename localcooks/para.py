from typing import Dict

kitchen_preferences: Dict[str, str] = {
    "commercial": "Commercial kitchen",
    "home": "Home kitchen",
    "notSure": "Not sure yet",
}

kitchen_preference_hints: Dict[str, str] = {
    "commercial": "Rent time in a licensed commercial kitchen near you.",
    "home": "Cook from your own kitchen with a home-based permit.",
    "notSure": "We'll help you figure out what works best.",
}

food_safety_license_answers: Dict[str, str] = {
    "yes": "Yes, I have a license",
    "no": "No, not yet",
    "notSure": "I'm not sure",
}

food_establishment_cert_answers: Dict[str, str] = {
    "yes": "Yes, I have a certificate",
    "no": "No, not yet",
    "notSure": "I'm not sure",
}
