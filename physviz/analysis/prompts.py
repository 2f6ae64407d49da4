"""Prompt templates for LLM-based problem analysis."""

EXTRACTION_PROMPT = """You are a physics problem parser. Analyze this physics problem and extract key information in JSON format.

Problem: "{problem_text}"

Extract and return ONLY a valid JSON object with this structure:
{{
  "problemType": "projectile|linear|collision|pendulum|incline|circular",
  "objects": [{{"name": "string", "mass": number, "velocity": number, "initialPosition": {{"x": number, "y": number}}}}],
  "parameters": {{
    "initialVelocity": {{"magnitude": number, "direction": "up|down|right|left", "angle": number}},
    "acceleration": {{"x": number, "y": number}},
    "gravity": number,
    "angle": number,
    "time": number,
    "distance": number,
    "length": number,
    "radius": number,
    "friction": number
  }},
  "units": {{
    "velocity": "m/s",
    "acceleration": "m/s²",
    "distance": "m",
    "mass": "kg"
  }},
  "adjustableParameters": ["velocity", "gravity", "angle", "mass"],
  "description": "brief description of the scenario"
}}

Rules:
- Angles are in degrees. For an incline, "angle" is the slope angle; for a pendulum, the release angle from vertical.
- For a collision, list exactly two objects in order, each with its own mass and velocity (0 if stationary).
- Omit parameters the problem does not mention.

Return ONLY the JSON, no other text."""


def build_extraction_prompt(problem_text: str) -> str:
    """Fill the extraction prompt with the user's problem statement."""
    return EXTRACTION_PROMPT.format(problem_text=problem_text.replace('"', "'"))
