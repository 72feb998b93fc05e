from datetime import date

from legis_rag.chunking import chunk_act
from legis_rag.corpus import SAMPLE_ACTS
from legis_rag.predicate import filter_effective
from legis_rag.prompting import assemble
from legis_rag.ranking import rank_by_recency


if __name__ == "__main__":
    chunks = [chunk for act in SAMPLE_ACTS for chunk in chunk_act(act)]
    before = rank_by_recency(filter_effective(chunks, date(2025, 6, 1)))
    after = rank_by_recency(filter_effective(chunks, date(2025, 9, 10)))
    prompt = assemble("What is the rural interstate speed limit?", after[:5], date(2025, 9, 10))
    print(
        {
            "acts": len(SAMPLE_ACTS),
            "chunks": len(chunks),
            "in_force_2025_06_01": len(before),
            "in_force_2025_09_10": len(after),
            "prompt_chars": len(prompt),
        }
    )
