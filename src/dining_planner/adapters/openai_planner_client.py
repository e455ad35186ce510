"""OpenAI Responses API client for meal planning."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from dining_planner.services.planner import PlannerClient


@dataclass
class OpenAIPlannerClient(PlannerClient):
    """Planner client backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    max_output_tokens: int = 2000

    @classmethod
    def create(cls, api_key: str) -> "OpenAIPlannerClient":
        """Create an OpenAI planner client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete_text(
        self, *, model: str, system_prompt: str, user_prompt: str
    ) -> str:
        """Return the model's text output."""
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=user_prompt,
            max_output_tokens=self.max_output_tokens,
        )
        return response.output_text or ""

    async def call_tool(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        tool_name: str,
        schema: dict[str, object],
    ) -> str | None:
        """Force a strict function call and return its arguments."""
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=user_prompt,
            max_output_tokens=self.max_output_tokens,
            tools=[
                {
                    "type": "function",
                    "name": tool_name,
                    "description": "Submit the selected menu items for each meal.",
                    "parameters": schema,
                    "strict": True,
                }
            ],
            tool_choice={"type": "function", "name": tool_name},
        )
        for output in response.output:
            if output.type == "function_call" and output.name == tool_name:
                return output.arguments
        return None
