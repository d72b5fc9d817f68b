import json
import sys

from link.service import run_assessment


def rank_answers(assessment_id, answers):
    result = run_assessment(assessment_id, answers)
    rank_list = [(category, result.category_scores[category]) for category in result.ranking]
    return result, rank_list


def main():
    if len(sys.argv) != 3:
        print("usage: python -m scripts.rank_categories <assessment-id> <answers.json>")
        sys.exit(2)

    assessment_id, path = sys.argv[1], sys.argv[2]
    with open(path) as f:
        answers = json.load(f)

    result, ranks = rank_answers(assessment_id, answers)

    print(f"\n===== {result.title.upper()} =====\n")

    for rank, (category, score) in enumerate(ranks, start=1):
        print(
            f"{rank:3d}. {result.label(category):<40} {score.percentage:3d}%"
            f"  (raw {score.raw}/{score.maximum}, {score.question_count} questions)"
        )

    if result.overall is not None:
        print(f"\n     overall: {result.overall}%  level: {result.level}")
    print(f"     answer quality: {result.quality['confidence']}")


if __name__ == "__main__":
    main()
