"""Aladino building blocks: expression trees, types, type inference, built-ins, diffs and reports."""