# Indian states with GST state codes
INDIAN_STATES: dict[str, str] = {
    "01": "Jammu & Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "26": "Dadra & Nagar Haveli and Daman & Diu",
    "27": "Maharashtra",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman & Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh",
    "38": "Ladakh",
}

PAYMENT_MODES = ("Cash", "Bank Transfer", "UPI", "Cheque")

# payment term -> days until due
PAYMENT_TERMS: dict[str, int] = {
    "COD": 0,
    "Net 7": 7,
    "Net 15": 15,
    "Net 30": 30,
    "Net 45": 45,
    "Net 60": 60,
}

CREDIT_NOTE_REASONS = (
    "Goods returned",
    "Defective goods",
    "Wrong goods delivered",
    "Rate difference",
    "Quality issue",
    "Discount on settlement",
    "Other",
)


def state_name(code: str | None) -> str | None:
    if not code:
        return None
    return INDIAN_STATES.get(code)
