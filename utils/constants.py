"""
Constants and prompt templates for the StratifyAI core.
Templates are rendered with str.format; literal braces are doubled.
"""

# Prompt for a fresh batch of thinking paths
THINKING_PATHS_PROMPT = """You are a strategic thinking assistant. For the following query: "{query}"

Generate 4 different thinking approaches/paths to solve this. For each path, provide:
1. A clear approach name (2-4 words)
2. Exactly 3 specific thinking steps for that approach
3. Each step should be a concrete action or analysis

Respond ONLY with valid JSON:
{{
  "paths": [
    {{
      "name": "Approach Name",
      "steps": ["Step 1 description", "Step 2 description", "Step 3 description"]
    }}
  ]
}}

Make the paths genuinely different approaches, not just variations. Think like a consultant presenting multiple strategies."""

# Prompt for continuation paths after a path has been executed
CONTINUATION_PATHS_PROMPT = """Based on this conversation context:

Original Question: "{original_query}"
Last Approach Used: "{last_path_name}" (executed {last_steps_executed} steps)
Latest Response (truncated): "{last_response_preview}..."

Generate 4 NEW thinking approaches that logically continue from where we left off. These should:
1. Build on the insights already gained
2. Offer different perspectives or deeper exploration
3. Represent the next logical steps in the thinking process
4. Propose alternative directions to explore

For each path, provide:
  - "name": 2-4 word approach name
  - "steps": exactly 3 specific next thinking steps

Respond ONLY with valid JSON in this shape:
{{
  "paths": [
    {{
      "name": "Approach Name",
      "steps": ["Step 1", "Step 2", "Step 3"]
    }}
  ]
}}"""

# Sequential path execution, rendered in three parts
EXECUTE_PATH_HEADER = """Original question: "{query}"

I'm following the "{path_name}" approach. I will execute these steps and structure my response to show my thinking process:

"""

EXECUTE_PATH_STEP_LINE = "Step {number}: {title}\n"

EXECUTE_PATH_STEP_TWO = """**Step 2: {title}**
[Now execute step 2, building on step 1. Show your thinking process for this specific step. What new insights emerge? How does this advance from step 1?]"""

EXECUTE_PATH_STEP_THREE = """**Step 3: {title}**
[Execute the final step. Complete your analysis up to this point. What conclusions can you draw from steps 1-3?]"""

EXECUTE_PATH_INSTRUCTIONS = """
IMPORTANT: You must think through and execute ONLY the {step_count} step{plural} listed above. Do NOT go beyond these steps or provide a complete solution.

Structure your response exactly like this format:

**Following "{path_name}" Approach:**

**Step 1: {step_one_title}**
[Think through and execute this specific step. Provide your actual reasoning, analysis, and findings for JUST this step. Be detailed but focused only on this step's scope.]

{step_two_section}

{step_three_section}

**Current Progress:**
[Summarize what you've accomplished in these {step_count} step{plural}. Note what still needs to be explored in future steps.]

REMEMBER: Only execute the steps you're asked to. Don't provide a complete answer - just show your thinking for the specified steps. Use **bold text** for important terms and bullet points for clarity."""

# Titles used when a path has fewer steps than the template expects
DEFAULT_STEP_TITLES = ("First Step", "Second Step", "Third Step")

# Non-sequential step execution
EXECUTE_STEPS_PROMPT = """You are a strategic thinking assistant.

User Question: "{query}"
Approach Selected: "{path_name}"

Execute ONLY the following selected steps. Do not discuss or propose any unselected steps:

{step_blocks}

Provide only the results and reasoning for the selected steps. Do not add a "Next Potential Steps" section or mention future steps."""

EXECUTE_STEPS_BLOCK = """**Step {number}: {title}**
[Execute this step. Show your thinking process specifically for this step. Reference earlier context if needed, but DO NOT execute unselected steps.]"""

# CSV analysis
CSV_ANALYSIS_PROMPT = """You are a senior data analyst inside a desktop tool called "StratifyAI".
The user has uploaded a SMALL CSV file. Here is the raw text sample (first lines):

---CSV START---
{csv_text}
---CSV END---

1) Quickly sanity-check the data (columns, types, missing values, obvious issues).
2) Give a HIGH-LEVEL SUMMARY of what this dataset seems to represent.
3) Provide 6-10 specific, insight-style bullet points (trends, segments, anomalies, comparisons).
4) Then generate 5-10 SMART follow-up questions the user could ask StratifyAI about this dataset later.

Format everything in clean Markdown with headings, bullet points and short subheadings. Be detailed and helpful but stay within 800-1000 words."""


class Messages:
    """User-facing error messages."""
    MISSING_API_KEY = "Gemini API key not found. Please set GEMINI_API_KEY (or GROQ_API_KEY) in your .env file."
    EMPTY_MODEL_OUTPUT = "Gemini response contained no text."
    NO_JSON_FOUND = "No JSON found in Gemini output."
    PATHS_PARSE_FAILED = "Failed to parse thinking paths JSON: {reason}"
    CONTINUATION_PARSE_FAILED = "Failed to parse continuation paths JSON: {reason}"
    NO_STEPS_SELECTED = "No steps selected."
    INVALID_STEP_COUNT = "Invalid step count."
    EMPTY_CSV = "Empty or invalid CSV content."
    NO_ANALYSIS = "No analysis returned from the model."
    UNKNOWN_ERROR = "Unknown error"


class Patterns:
    """Regular expression patterns for model output parsing."""
    # Greedy: first "{" through the last "}" in the text
    JSON_OBJECT = r'\{[\s\S]*\}'
