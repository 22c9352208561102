"""
Vision Prompts - Instructions sent with every ticket image
"""

# Field, description, example values (in wire order)
TICKET_FIELDS = [
    ("movieTitle", "The title of the movie", ["Wonka"]),
    ("showTime", "The time of the movie showing", ["6:45pm"]),
    ("showDate", "The date of the movie showing", ["Mon 01/15/2024"]),
    ("price", "The ticket price", ["$14.99"]),
    ("seatNumber", "The seat assignment", ["L6"]),
    ("movieRating", "The MPAA rating of the movie", ["PG", "PG-13", "R"]),
    ("theaterRoom", "The specific theater/auditorium number", ["Theater 4"]),
    ("ticketNumber", "The unique ticket identifier", ["270410133"]),
    ("theaterName", "The specific location name", ["Assembly Row"]),
    ("theaterChain", "The theater company name", ["AMC", "Regal"]),
    ("ticketType", "The type of ticket", ["Adult", "Child", "Senior", "Student", "Military"]),
]

USER_INSTRUCTION = (
    "Extract all available information from this movie ticket image. "
    "Return ONLY a valid JSON object with the specified fields."
)

CONNECTION_TEST_MESSAGE = "Testing API connection. Please respond with 'Connection successful'."

_CLOSING_RULES = (
    "For each field, return the exact text as it appears on the ticket. "
    "If you cannot find specific information, use null for that field. "
    "Do not make assumptions or provide placeholder values.\n\n"
    "Respond ONLY with a valid JSON object containing these fields and nothing else. "
    "Do not include any explanations or notes outside the JSON."
)


def build_prompt(style: str = "list") -> str:
    """
    System prompt naming all eleven fields with one example each.

    Args:
        style: "list" renders one "- field: description (Ex. value)" line per field,
            "json" renders a JSON skeleton of field -> description.
    """
    if style == "json":
        body = ",\n".join(
            f'  "{key}": "{description} (e.g. {", ".join(examples)})"'
            for key, description, examples in TICKET_FIELDS
        )
        return (
            "You are a specialized movie ticket information extraction system.\n"
            "Your task is to extract ONLY the following specific fields from a movie ticket "
            "image and format them in a JSON object:\n"
            "{\n" + body + "\n}\n\n" + _CLOSING_RULES
        )

    body = "\n".join(
        f"- {key}: {description} (Ex. {' or '.join(repr_example(e) for e in examples)})"
        for key, description, examples in TICKET_FIELDS
    )
    return (
        "You are a specialized movie ticket information extractor.\n"
        "Your task is to analyze the image of a movie ticket and extract the following "
        "specific information in JSON format:\n" + body + "\n\n" + _CLOSING_RULES
    )


def repr_example(example: str) -> str:
    return f'"{example}"'
