"""
Demo script for the SENSORVOTE API
"""
import requests


def demo_vote(payload, description):
    """Send a vote request to a running SENSORVOTE server"""
    print(f"\n{'='*80}")
    print(f"Testing: {description}")
    print(f"{'='*80}")
    for cid, labels in payload["predictions"].items():
        print(f"  {cid:>4} (accuracy {payload['accuracies'][cid]:.2f}): {' '.join(labels)}")
    print()

    try:
        response = requests.post(
            "http://localhost:8000/api/vote",
            json=payload,
            timeout=10
        )

        if response.status_code == 200:
            result = response.json()

            print("Weights:")
            for cid, weight in result['weights'].items():
                print(f"  - {cid}: {weight:.3f}")
            print(f"Ensemble: {' '.join(result['predictions'])}")
            if result['accuracy'] is not None:
                print(f"Ensemble Accuracy: {result['accuracy']*100:.1f}%")

        else:
            print(f"Error: {response.status_code}")
            print(response.text)

    except requests.RequestException as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    print("\n" + "="*80)
    print("SENSORVOTE - Accuracy-Weighted Ensemble Demo")
    print("="*80)

    # Two strong classifiers agree, the weak one dissents
    majority = {
        "predictions": {"rf": ["A"], "gbm": ["A"], "knn": ["B"]},
        "accuracies": {"rf": 0.95, "gbm": 0.90, "knn": 0.60},
    }

    # An accurate classifier outvotes two weak ones
    weighted = {
        "predictions": {"rf": ["C", "D", "E"], "gbm": ["B", "D", "A"], "knn": ["B", "D", "A"]},
        "accuracies": {"rf": 0.99, "gbm": 0.40, "knn": 0.45},
        "true_labels": ["C", "D", "E"],
    }

    # Equal weights on different labels
    tie = {
        "predictions": {"rf": ["B"], "gbm": ["A"]},
        "accuracies": {"rf": 0.80, "gbm": 0.80},
    }

    demo_vote(majority, "Majority of Accurate Classifiers")
    demo_vote(weighted, "Accurate Minority")
    demo_vote(tie, "Tie (alphabetically first label wins)")

    print("\n" + "="*80)
    print("Demo Complete!")
    print("="*80 + "\n")
