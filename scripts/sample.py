import sys

from core.respondent import ViewerTier
from fixtures.sample_responses import SAMPLE_ASSESSMENTS, SAMPLE_RESPONSES
from link.service import run_assessment
from presentation.renderer import render


def print_result(name: str, tier: ViewerTier = ViewerTier.FREE):
    result = run_assessment(SAMPLE_ASSESSMENTS[name], SAMPLE_RESPONSES[name])
    view = render(result, tier)

    print(f"\n=== {name} ({tier.value}) ===\n")
    print(view.title)
    print(view.description)

    print("\nScores:")
    for category, value in view.scores.items():
        print(f"- {result.label(category)}: {value}%")

    if result.overall is not None:
        print(f"\nOverall: {result.overall}% ({result.level})")

    print("\nStrengths:")
    for s in view.strengths:
        print(f"- {s}")

    if view.next_steps:
        print("\nNext steps:")
        for step in view.next_steps:
            print(f"- {step}")

    print(f"\nAnswer quality: {result.quality['confidence']} {result.quality['flags']}")


if __name__ == "__main__":
    names = sys.argv[1:] or list(SAMPLE_RESPONSES)
    for sample_name in names:
        print_result(sample_name)
