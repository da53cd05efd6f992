"""LLM agent using OpenAI library with OpenRouter, Groq, Hugging Face or Ollama."""

import json
import os
import re
import time
from typing import Optional

from openai import OpenAI

from palaceagent.engine import (
    Action,
    ConfirmReady,
    DrawFromDeck,
    PickUpPile,
    PlayCards,
    PlayerView,
    ResolveForced,
    SwapCard,
)

OPENROUTER_BASE = "https://openrouter.ai/api/v1"
GROQ_BASE = "https://api.groq.com/openai/v1"
OLLAMA_BASE = "http://localhost:11434/v1"
HUGGINGFACE_BASE = "https://router.huggingface.co/v1"

RULES = """You are playing Palace, a shedding card game. Get rid of all your cards; the last player holding cards loses.
- Play cards of equal or higher rank than the top of the pile (2 is highest of all, then A K Q J 10 9 ... 4).
- 2 resets the pile (anything may follow), 10 burns the pile, 3 is transparent (the card under it still counts).
- After a 7 the next card must be 7 or lower.
- Four cards of the same rank in a row burn the pile. After a burn you play again.
- You play from your hand first, then face-up cards, then face-down cards blind.
- If you cannot or will not play, pick up the pile."""


def _cards(cards) -> str:
    return " ".join(str(c) for c in cards) or "(none)"


def _format_player_view(pv: PlayerView, player_id: str) -> str:
    """Format player view as text for the LLM."""
    lines = [
        "=== Your hand ===",
        _cards(pv.my_hand),
        "",
        "=== Your face-up cards ===",
        _cards(pv.my_face_up),
        "",
        f"=== Your face-down cards: {pv.my_face_down_count} ===",
        "",
        "=== Pile ===",
        f"{pv.pile_count} cards, top: {pv.pile_top or 'empty'}, card to beat: {pv.effective_top or 'anything'}",
        "Must play 7 or lower" if pv.must_play_low else "",
        f"Deck: {pv.deck_count} cards, burned: {pv.burn_count} cards",
    ]
    if pv.forced_card is not None:
        playable = "playable" if pv.forced_card_playable else "NOT playable"
        lines.extend(["", f"=== Forced card: {pv.forced_card} ({playable}) ==="])
    lines.extend(["", "=== Opponents ==="])
    for opp in pv.opponents:
        status = " (finished)" if opp.finished else ""
        lines.append(
            f"  {opp.name}: {opp.hand_count} in hand, face-up {_cards(opp.face_up)}, "
            f"{opp.face_down_count} face-down{status}"
        )
    lines.extend(["", "=== Game History (last 10 events) ==="])
    if pv.history:
        lines.extend(f"- {h}" for h in pv.history)
    else:
        lines.append("No history yet.")
    return "\n".join(lines)


def _describe_action(action: Action, pv: PlayerView) -> str:
    if isinstance(action, PlayCards):
        if pv.my_hand:
            return f"PLAY {_cards(pv.my_hand[i] for i in action.indices)}"
        if pv.my_face_up:
            return f"PLAY face-up {_cards(pv.my_face_up[i] for i in action.indices)}"
        return f"FLIP face-down card #{action.indices[0]}"
    if isinstance(action, PickUpPile):
        return "PICK UP the pile"
    if isinstance(action, DrawFromDeck):
        return "DRAW from the deck"
    if isinstance(action, ResolveForced):
        return f"{action.decision.value.upper()} the forced card"
    if isinstance(action, SwapCard):
        return (
            f"SWAP hand {pv.my_hand[action.hand_index]} "
            f"with face-up {pv.my_face_up[action.face_up_index]}"
        )
    if isinstance(action, ConfirmReady):
        return "READY (stop swapping)"
    return repr(action)


def _format_legal_actions(actions: list[Action], pv: PlayerView) -> str:
    """Format legal actions as text."""
    return "\n".join(f"{i}: {_describe_action(a, pv)}" for i, a in enumerate(actions))


def _fallback_action(actions: list[Action]) -> Action:
    """Play the first playable group if possible, otherwise the safest non-play."""
    for a in actions:
        if isinstance(a, PlayCards):
            return a
    for kind in (ConfirmReady, PickUpPile, ResolveForced):
        for a in actions:
            if isinstance(a, kind):
                return a
    return actions[0]


def _parse_action_response(response: str, actions: list[Action]) -> Action | None:
    """Parse LLM response into an Action."""
    # 1. Try to find a JSON-like object in the response
    json_match = re.search(r'(\{.*?\})', response, re.DOTALL)
    if json_match:
        json_str = json_match.group(1)
        for candidate in (json_str, json_str.replace("'", '"')):
            try:
                data = json.loads(candidate)
            except (json.JSONDecodeError, ValueError):
                continue
            if isinstance(data, dict) and isinstance(data.get("action_index"), int):
                idx = data["action_index"]
                if 0 <= idx < len(actions):
                    return actions[idx]
                print(f"[_parse_action_response] Index {idx} out of range (0-{len(actions)-1})")
            break

    # 2. Targeted regex for "action_index": N (Support both ' and " and no quotes)
    match = re.search(r'["\']?action_index["\']?\s*:\s*(\d+)', response, re.IGNORECASE)
    if match:
        idx = int(match.group(1))
        if 0 <= idx < len(actions):
            return actions[idx]
        print(f"[_parse_action_response] Index {idx} out of range (0-{len(actions)-1}) from regex")

    # 3. Fallback: "PICK UP" literally
    if "PICK UP" in response.upper():
        for a in actions:
            if isinstance(a, PickUpPile):
                return a

    # 4. Last resort: Try to find a standalone number
    cleaned_response = re.sub(r'[{}\[\]"\'.,:]', ' ', response)
    for word in cleaned_response.split():
        if word.isdigit():
            idx = int(word)
            if 0 <= idx < len(actions):
                return actions[idx]

    return None


class LLMAgent:
    """Agent that uses an LLM to choose actions."""

    def __init__(
        self,
        provider: str = "openrouter",
        model: str = "openai/gpt-4o-mini",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        rate_limit: Optional[float] = None,
    ):
        if provider == "openrouter":
            base_url = OPENROUTER_BASE
            key = api_key or os.environ.get("OPENROUTER_API_KEY")
        elif provider == "groq":
            base_url = GROQ_BASE
            key = api_key or os.environ.get("GROQ_API_KEY")
        elif provider == "ollama":
            base_url = os.environ.get("OLLAMA_BASE_URL", OLLAMA_BASE)
            key = "ollama"
        elif provider == "huggingface":
            base_url = HUGGINGFACE_BASE
            key = api_key or os.environ.get("HUGGINGFACE_API_KEY")
        else:
            raise ValueError(f"Unknown provider: {provider}")

        if not key:
            raise ValueError(f"API key required for {provider}. Set {provider.upper()}_API_KEY or pass api_key.")

        self._client = OpenAI(api_key=key, base_url=base_url)
        self._model = model
        self._timeout = timeout
        self._provider = provider
        self._rate_limit = rate_limit  # Requests per minute
        self._request_history: list[float] = []

        print(f"[{self.name}] Initialized with provider={provider}, base_url={base_url}, timeout={timeout}s, rate_limit={rate_limit or 'None'} rpm")

    @property
    def name(self) -> str:
        return f"llm-{self._model}"

    def _wait_for_rate_limit(self):
        """Block if rate limit is exceeded."""
        if not self._rate_limit:
            return

        now = time.time()
        self._request_history = [t for t in self._request_history if now - t < 60.0]

        if len(self._request_history) >= self._rate_limit:
            oldest = self._request_history[0]
            wait_time = 60.0 - (now - oldest)
            if wait_time > 0:
                print(f"[{self.name}] Rate limit reached ({len(self._request_history)}/{self._rate_limit} rpm). Waiting {wait_time:.2f}s...")
                time.sleep(wait_time)

        self._request_history.append(time.time())

    def get_action(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
        player_id: str,
    ) -> Action | None:
        if not legal_actions:
            return None

        prompt = f"""{RULES}

{_format_player_view(player_view, player_id)}

=== Legal actions ===
{_format_legal_actions(legal_actions, player_view)}

INSTRUCTIONS:
Select the best action to avoid being the last player holding cards.
Analyze the game history and board state.
Respond with a JSON object containing the index of your chosen action.
Example: {{"action_index": 2}}
"""

        for attempt in range(1, 4):
            start_time = time.time()
            try:
                self._wait_for_rate_limit()

                kwargs = {
                    "model": self._model,
                    "messages": [{"role": "user", "content": prompt}],
                    "timeout": self._timeout,
                }

                # Only pass response_format if we know the provider supports it and we want JSON mode
                if "gpt-4" in self._model or "gpt-3.5" in self._model or "groq" in self._provider:
                    kwargs["response_format"] = {"type": "json_object"}

                print(f"[{self.name}] Attempt {attempt}: Sending request to {self._provider} (timeout={self._timeout}s)...")

                resp = self._client.chat.completions.create(**kwargs)

                duration = time.time() - start_time
                content = resp.choices[0].message.content or ""
                print(f"[{self.name}] Received response in {duration:.2f}s")

                action = _parse_action_response(content, legal_actions)
                if action is not None:
                    return action

                print(f"[{self.name}] Failed to parse action from response:")
                print("-" * 40)
                print(content)
                print("-" * 40)
            except Exception as e:
                duration = time.time() - start_time
                print(f"[{self.name}] Error on attempt {attempt} after {duration:.2f}s: {type(e).__name__}: {e}")

        print(f"[{self.name}] All retries failed. Falling back to a default action.")
        return _fallback_action(legal_actions)
