SAMPLE_LIFE_FORM = {
    "age": "35",
    "income": "1200000",
    "dependents": "2",
    "loans": "2500000",
    "expenses": "800000",
    "goals": "5000000",
}

SAMPLE_HEALTH_FORM = {
    "age": "50",
    "family_size": "5",
    "city": "metro",
    "pre_existing": "yes",
    "room_type": "private",
}

SAMPLE_VEHICLE_FORM = {
    "vehicle_value": "800000",
    "vehicle_age": "3",
    "city": "non-metro",
    "previous_claims": "0",
    "voluntary_deductible": "5000",
}

SAMPLE_CHAT_REQUEST = {
    "message": "How much term cover should I buy with two kids and a home loan?",
    "context": "insurance",
    "history": [
        {"role": "user", "content": "I earn 12 lakh a year."},
        {"role": "assistant", "content": "Thanks, that helps me size your cover."},
        {"role": "user", "content": "I also have a 25 lakh home loan."},
        {"role": "assistant", "content": "Outstanding loans should be covered in full."},
    ],
}

SAMPLE_PROFILE = {
    "id": "3f1c9a52-0000-4000-8000-000000000001",
    "age": 35,
    "monthly_income": 100000,
    "monthly_expenses": 60000,
    "current_savings": 450000,
    "dependents": 2,
    "risk_tolerance": "moderate",
    "investment_experience": "beginner",
}
