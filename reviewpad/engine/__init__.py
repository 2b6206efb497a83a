"""Review file model, loading, linting, label handling and workflow evaluation."""