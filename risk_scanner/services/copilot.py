"""
Conversational assistant that explains an audit report.

The copilot never changes the analysis. It receives the finished report and
the audited source as context and answers questions about them, either via
an OpenAI chat model or, without an API key, from canned report-driven
answers.
"""
import json
import logging
from typing import List, Dict, Optional

from openai import OpenAI, OpenAIError

from risk_scanner.exceptions import CopilotError
from risk_scanner.models.audit_result import AuditResult
from risk_scanner.services.risk_scorer import RiskScorer

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a Solidity security expert helping a developer understand an automated audit report. "
    "The report comes from a heuristic scanner, so findings can be false positives. "
    "Explain vulnerabilities clearly, suggest concrete fixes with code, and say when a finding "
    "looks like a false positive given the source."
)


class AuditCopilot:
    """Answers questions about one audit report."""

    def __init__(self, audit_result: AuditResult, source_text: str, api_key: Optional[str] = None,
                 model: str = "gpt-4", api_base_url: Optional[str] = None, client: Optional[OpenAI] = None):
        """
        Initialize the copilot.

        Args:
            audit_result: Report to discuss
            source_text: Audited contract source
            api_key: OpenAI API key; without one the copilot answers offline
            model: OpenAI model to use
            api_base_url: Base URL for OpenAI API
            client: Preconfigured OpenAI client, overrides api_key/api_base_url
        """
        self.audit_result = audit_result
        self.source_text = source_text
        self.model = model
        self.history: List[Dict[str, str]] = []

        if client is None and api_key:
            client_args = {"api_key": api_key}
            if api_base_url:
                client_args["base_url"] = api_base_url
            client = OpenAI(**client_args)

        self.client = client

    def build_context_message(self) -> str:
        """Render the report and source as the first user message."""
        report = json.dumps(self.audit_result.to_dict(), indent=2)
        return (
            f"Audit report:\n```json\n{report}\n```\n\n"
            f"Contract source:\n```solidity\n{self.source_text}\n```"
        )

    def build_messages(self, question: str) -> List[Dict[str, str]]:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": self.build_context_message()},
        ]
        messages.extend(self.history)
        messages.append({"role": "user", "content": question})
        return messages

    def ask(self, question: str) -> str:
        """
        Answer a question and record the exchange in the history.

        Raises:
            CopilotError: If the model call fails or returns no content
        """
        if self.client is None:
            answer = self.offline_answer(question)
        else:
            answer = self._ask_model(question)

        self.history.append({"role": "user", "content": question})
        self.history.append({"role": "assistant", "content": answer})
        return answer

    def _ask_model(self, question: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(question),
                temperature=0.7,
                max_tokens=1024
            )
        except OpenAIError as e:
            logger.error(f"Error calling OpenAI API: {str(e)}")
            raise CopilotError(f"OpenAI API error: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise CopilotError("No response content from OpenAI")
        return content

    def offline_answer(self, question: str) -> str:
        """Keyword-driven answer built only from the report."""
        result = self.audit_result
        text = question.lower()

        if "reentrancy" in text:
            reentrancy = next((v for v in result.vulnerabilities if "reentrancy" in v.title.lower()), None)
            if reentrancy:
                return (
                    "Reentrancy attacks are dangerous because they allow an attacker to recursively call "
                    "a function before the previous call completes. This can drain funds from a contract. "
                    f"{reentrancy.suggested_fix}"
                )
            return (
                "Reentrancy attacks occur when external calls are made before state updates. Use the "
                "ReentrancyGuard pattern from OpenZeppelin or follow the checks-effects-interactions pattern."
            )

        if "fix" in text or "how" in text:
            first = result.vulnerabilities[0]
            return f'To fix "{first.title}": {first.suggested_fix}'

        if "score" in text or "risk" in text:
            weights = RiskScorer.SEVERITY_WEIGHTS
            return (
                f"The risk score of {result.risk_score}/100 ({result.risk_level}) is calculated based on "
                "the number and severity of vulnerabilities found. Critical issues add "
                f"{weights['critical']} points, high add {weights['high']}, medium add {weights['medium']}, "
                f"and low add {weights['low']} points each."
            )

        if "vulnerab" in text or "issue" in text:
            serious = [v.title for v in result.vulnerabilities if v.severity in ("critical", "high")]
            if not serious:
                return (
                    f"I found {len(result.vulnerabilities)} potential vulnerability/vulnerabilities, "
                    "none of them high or critical."
                )
            return (
                f"I found {len(result.vulnerabilities)} potential vulnerability/vulnerabilities. "
                f"The most critical ones are: {', '.join(serious)}."
            )

        return (
            f"Based on the audit results, your contract has a {result.risk_level} risk level with "
            f"{len(result.vulnerabilities)} issue(s) detected. I can help explain specific vulnerabilities, "
            "suggest fixes, or clarify the risk assessment. What would you like to know more about?"
        )
