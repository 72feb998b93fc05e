from legis_rag.chunking import chunk_act
from legis_rag.corpus import SAMPLE_ACTS
from legis_rag.io_utils import save_chunks


def main() -> None:
    """Chunk the bundled sample acts and persist them as JSONL."""
    chunks = [chunk for act in SAMPLE_ACTS for chunk in chunk_act(act)]
    save_chunks(chunks, "data/chunks.jsonl")
    print(f"Wrote {len(chunks)} chunks from {len(SAMPLE_ACTS)} acts to data/chunks.jsonl")


if __name__ == "__main__":
    main()
