"""
Schema-driven prompt for LLM-based code quality review.

The prompt enforces a structured JSON output matching AnalysisResult.
Rendering is deterministic: identical inputs give an identical prompt.
"""


OUTPUT_SCHEMA = """{
  "overallScore": <number 1-10>,
  "readability": {
    "score": <number 1-10>,
    "issues": [<array of issues>],
    "suggestions": [<array of suggestions>]
  },
  "modularity": {
    "score": <number 1-10>,
    "issues": [<array of issues>],
    "suggestions": [<array of suggestions>]
  },
  "potentialBugs": [
    {
      "line": <line number>,
      "severity": "high|medium|low",
      "description": "<description>",
      "suggestion": "<how to fix>"
    }
  ],
  "bestPractices": [<array of best practice violations>],
  "summary": "<overall summary>"
}"""


def build_review_prompt(code: str, filename: str, language: str) -> str:
    """
    Build the review prompt for a single source file.

    Args:
        code: Full text of the submitted file
        filename: Declared filename
        language: Language label from the classifier

    Returns:
        Formatted prompt string
    """
    prompt_parts = [
        f"Review this {language} code for readability, modularity, and potential bugs, "
        "then provide improvement suggestions.",
        f"\nFilename: {filename}",
        f"\nCode:\n{code}",
        "\nProvide a detailed review in the following JSON format:",
        OUTPUT_SCHEMA,
        "\n## Rules\n"
        "- All scores are integers from 1 (poor) to 10 (excellent)\n"
        "- Line numbers refer to the file above, starting at 1; omit \"line\" if unknown\n"
        "- Use empty arrays when there is nothing to report\n"
        "- Respond with the JSON object only: no markdown fences, no text before or after it",
    ]

    return "\n".join(prompt_parts)
