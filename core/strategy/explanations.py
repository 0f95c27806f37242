"""Plain-language reasons behind basic strategy decisions."""

from core.strategy.actions import Action, Chart


def card_label(value: int) -> str:
    """Short label for a card value in hand types: A, T or the number."""
    if value == 11:
        return "A"
    if value == 10:
        return "T"
    return str(value)


def dealer_label(value: int) -> str:
    """Short label for a dealer upcard in situation strings: A or the number."""
    return "A" if value == 11 else str(value)


def dealer_name(value: int) -> str:
    """Dealer upcard as written in explanations."""
    return "Ace" if value == 11 else str(value)


def explain(
    action: Action,
    chart: Chart,
    total: int,
    pair_value: int | None,
    dealer_upcard: int,
    hand_type: str,
) -> str:
    """
    Pick the explanation for a resolved play.

    Well-known spots get a canned reason; anything else gets a generic
    sentence naming the action, hand type and dealer card.
    """
    dealer = dealer_name(dealer_upcard)
    dealer_weak = 2 <= dealer_upcard <= 6

    if chart is Chart.PAIRS:
        if pair_value == 11:
            return "Always split Aces. Two chances at 21 is better than soft 12."
        if pair_value == 8:
            return "Always split 8s. 16 is the worst hand; two 8s give you two chances at 18."
        if pair_value == 10:
            return "Never split 10s. 20 is too strong to break up."
        if pair_value == 5:
            return "Never split 5s. Treat as hard 10 and double against weak dealers."
        if pair_value == 4:
            return "Only split 4s against 5-6. Otherwise, hit your 8."
        if pair_value == 9 and action is Action.STAND:
            return "Split 9s except against 7 (you'd make 18 vs likely 17), 10, or A."
        if action is Action.SPLIT:
            return (
                "Split low pairs against weak dealers (2-7) to capitalize "
                "on dealer bust potential."
            )
        if action is Action.HIT:
            return (
                f"Against a strong dealer {dealer}, don't split. "
                "Hit and try to improve the hand."
            )

    elif chart is Chart.SOFT:
        if action is Action.DOUBLE:
            return "Double with soft hands against weak dealers. You can't bust and dealer may bust."
        if total == 18 and action is Action.STAND:
            return f"Soft 18 is strong against dealer {dealer}. Stand and take your 18."
        if total == 18 and action is Action.HIT:
            return (
                f"Soft 18 vs {dealer}: Hit to try for a better hand. "
                "18 often loses to strong dealer upcards."
            )
        if action is Action.HIT:
            return "With a soft hand, you can't bust on one hit. Try to improve your total."

    else:
        if action is Action.DOUBLE:
            if total == 11:
                return "Always double on 11. You have the best chance to make 21 and can't bust with one card."
            if total == 10:
                return "Double on 10 against dealer 2-9. You'll likely make 20 and have the advantage."
            if total == 9:
                return (
                    "Double on 9 against weak dealer cards (3-6). You have a good "
                    "chance to make 19 and the dealer may bust."
                )
        if total == 12 and dealer_upcard <= 3:
            return f"12 vs {dealer}: Hit because 2-3 are less likely to bust."
        if total == 12 and dealer_weak:
            return f"12 vs {dealer}: Stand and let the dealer bust with 4-6."
        if action is Action.STAND:
            if dealer_weak:
                return (
                    f"With {hand_type} vs dealer {dealer}, stand and let the dealer bust. "
                    "Dealer must hit and has a high chance of busting."
                )
            return f"{hand_type} is strong enough to stand. Any hit risks busting."
        if action is Action.HIT:
            if total <= 11:
                return "Your total is too low to stand. Hit to improve your hand."
            return (
                f"Against a strong dealer {dealer}, you need to try to improve. "
                "The dealer likely has a good hand."
            )

    return f"Basic strategy recommends {action.name} for {hand_type} vs dealer {dealer}."
