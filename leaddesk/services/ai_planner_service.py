from openai import OpenAI
import google.generativeai as genai
from leaddesk.config import settings
from leaddesk.core.exceptions import ExternalServiceError
from leaddesk.models.outreach import Channels, Intents
import logging
import json
import time

logger = logging.getLogger(__name__)

PLANNER_INSTRUCTIONS = (
    "You are the Outreach Planner for Lead Desk. Plan 3-5 concrete outreach steps over the next horizonDays."
    " Use only channels: {channels}. Use only intents: {intents}."
    " Provide short human-readable goals. Use GBP/£ if you mention amounts."
    " stageHistory is an array of recent events (type, created_at, note) you can use to set tone."
    ' Output ONLY valid JSON with a top-level "steps" array of objects: {{offsetDays, channel, intent, goal}}.'
    " offsetDays must be a whole number between 0 and the provided horizonDays."
)


class AIPlannerService:
    """
    Content generator for outreach plans.
    Returns raw, untrusted step candidates; callers must validate them.
    """
    def __init__(self):
        self.provider = "openai"
        self.client = None
        self.model = settings.AI_MODEL
        
        # Initialize Gemini if configured (preferred or if OpenAI missing)
        if settings.GEMINI_API_KEY:
            try:
                genai.configure(api_key=settings.GEMINI_API_KEY)
                self.client = genai.GenerativeModel(settings.AI_MODEL)
                self.provider = "gemini"
                logger.info("AI Planner initialized with Gemini")
            except Exception as e:
                logger.error(f"Failed to initialize Gemini: {e}")

        # Fallback/Default to OpenAI if Gemini not set but OpenAI is
        if not self.client and settings.OPENAI_API_KEY:
            try:
                self.client = OpenAI(api_key=settings.OPENAI_API_KEY)
                self.provider = "openai"
                logger.info("AI Planner initialized with OpenAI")
            except Exception as e:
                logger.error(f"Failed to initialize OpenAI: {e}")

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def _generate_content(self, prompt: str) -> str:
        """Helper to generate JSON text from either provider."""
        if self.provider == "gemini":
            max_retries = settings.AI_MAX_RETRIES
            base_delay = settings.AI_RATE_LIMIT_BACKOFF_SECONDS
            
            for attempt in range(max_retries):
                try:
                    response = self.client.generate_content(prompt)
                    text = response.text.strip()
                    # Clean markdown code blocks if present
                    if text.startswith("```json"):
                        text = text[7:]
                    if text.startswith("```"):
                        text = text[3:]
                    if text.endswith("```"):
                        text = text[:-3]
                    return text.strip()
                except Exception as e:
                    is_rate_limit = "429" in str(e) or "quota" in str(e).lower()
                    if is_rate_limit and attempt < max_retries - 1:
                        logger.warning(f"Gemini Rate Limit Hit. Waiting {base_delay}s... (Attempt {attempt+1}/{max_retries})")
                        time.sleep(base_delay)
                    else:
                        raise
            raise ExternalServiceError("Gemini", "no generation attempts configured")
        else:
            # OpenAI generation
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=0.2
            )
            return response.choices[0].message.content or "{}"

    def build_prompt(self, payload: dict) -> str:
        instructions = PLANNER_INSTRUCTIONS.format(
            channels=", ".join(sorted(Channels.ALL)),
            intents=", ".join(sorted(Intents.ALL))
        )
        return f"{instructions}\n\nINPUT:\n{json.dumps(payload, default=str)}"

    def generate_candidates(self, payload: dict) -> list:
        """
        Ask the model for a plan. payload carries dealSummary, stageHistory and horizonDays.
        Raises ExternalServiceError when the planner is unavailable or its answer is unusable.
        """
        if not self.client:
            raise ExternalServiceError("AI planner", "not configured")

        try:
            result_text = self._generate_content(self.build_prompt(payload))
            parsed = json.loads(result_text)
        except json.JSONDecodeError as e:
            raise ExternalServiceError("AI planner", f"invalid JSON: {e}") from e
        except Exception as e:
            raise ExternalServiceError(f"AI planner ({self.provider})", str(e)) from e

        steps = parsed.get("steps") if isinstance(parsed, dict) else None
        if not isinstance(steps, list):
            raise ExternalServiceError("AI planner", "response has no steps array")
        return steps


ai_planner_service = AIPlannerService()
