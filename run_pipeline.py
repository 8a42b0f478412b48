import argparse
import logging

from duo_recall import config
from duo_recall.pipeline import run_files, write_output


def main(argv=None):
    parser = argparse.ArgumentParser(description='Aggregate recall and cognate status per (word, language).')
    parser.add_argument('input_file', action="store", nargs="?", default=config.RAW_DATA_PATH, help='Learning traces CSV file')
    parser.add_argument('-t', '--translations', default=config.TRANSLATIONS_PATH, help="Translation table (learning_language, lemma, item)")
    parser.add_argument('-p', '--pos-reference', default=None, help="POS reference table (pos, Type); built-in Apertium table if omitted")
    parser.add_argument('-o', '--output', default=config.OUTPUT_PATH, help="Output .csv or .parquet")
    parser.add_argument('--ui-language', default=config.UI_LANGUAGE, help="Interface language of the population studied")
    parser.add_argument('--ties', dest="tie_policy", choices=config.TIE_POLICIES, default=config.TIE_POLICY,
                        help="Rows tied at max(history_seen): keep all, or a single one")
    parser.add_argument('--uncategorized', default=config.UNCATEGORIZED, help="Coarse POS value that is dropped")
    parser.add_argument('-x', dest="user_fraction", type=float, default=1.0, help="Fraction of users to sample")
    parser.add_argument('--complete-only', action="store_true", default=False, help="Drop rows without a translation")
    parser.add_argument('--chunksize', type=int, default=config.CHUNK_SIZE, help="Rows per chunk when reading input")
    parser.add_argument('--sep', default=",", help="Field delimiter of the input tables")
    parser.add_argument('-v', '--verbose', action="store_true", default=False, help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    summary, report = run_files(
        args.input_file,
        args.translations,
        args.pos_reference,
        ui_language=args.ui_language,
        tie_policy=args.tie_policy,
        uncategorized=args.uncategorized,
        user_fraction=args.user_fraction,
        complete_only=args.complete_only,
        chunksize=args.chunksize,
        sep=args.sep,
    )
    report.log_summary()
    write_output(summary, args.output)


if __name__ == "__main__":
    main()
