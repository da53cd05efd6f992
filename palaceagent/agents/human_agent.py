"""Human agent - reads actions from terminal."""

from palaceagent.engine import Action
from palaceagent.agents.llm_agent import _format_legal_actions


class HumanAgent:
    """Agent that prompts the human for input via terminal."""

    def __init__(self, name: str = "human"):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def get_action(
        self,
        player_view,
        legal_actions: list[Action],
        player_id: str,
    ) -> Action | None:
        if not legal_actions:
            return None

        print("\n--- Your turn ---")
        print("Your hand:", " ".join(str(c) for c in player_view.my_hand))
        print("Your face-up:", " ".join(str(c) for c in player_view.my_face_up))
        print("Your face-down:", player_view.my_face_down_count, "cards")
        print("Pile top:", player_view.pile_top, "| to beat:", player_view.effective_top)
        if player_view.must_play_low:
            print("Must play 7 or lower!")
        if player_view.forced_card is not None:
            print("Forced card:", player_view.forced_card)
        print("\nLegal actions:")
        print(_format_legal_actions(legal_actions, player_view))

        while True:
            try:
                raw = input("Enter number: ").strip()
                idx = int(raw)
                if 0 <= idx < len(legal_actions):
                    return legal_actions[idx]
            except ValueError:
                pass
            except EOFError:
                return None
            print("Invalid. Try again.")
